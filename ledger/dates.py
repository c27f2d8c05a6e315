from datetime import date, datetime, time
from typing import Optional, Union

DateLike = Union[str, date, datetime]

UNDATED_KEY = "undated"


def to_datetime(value: DateLike) -> datetime:
    """Strict parse to a naive local datetime; raises ValueError/TypeError.

    Aware timestamps ("...Z", "+02:00") are converted to local time first,
    date-only values become midnight.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise TypeError(f"not a date: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def safe_parse_date(value: Optional[DateLike]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return to_datetime(value)
    except (ValueError, TypeError):
        return None


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.max)


def day_key(value: Optional[DateLike]) -> str:
    parsed = safe_parse_date(value)
    return parsed.strftime("%Y-%m-%d") if parsed else UNDATED_KEY


def day_title(key: str) -> str:
    """Title such as "Sunday, Jan 5" for a YYYY-MM-DD key."""
    if key == UNDATED_KEY:
        return "Undated"
    parsed = datetime.strptime(key, "%Y-%m-%d")
    return f"{parsed:%A}, {parsed:%b} {parsed.day}"
