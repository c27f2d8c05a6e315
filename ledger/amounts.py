"""Amount text codec.

Turns what a person typed ("1.234,56", "1,234.56", "12,5", " 1 500 ") into a
float and back. Parsing never raises: anything that cannot be read as an
amount comes back as ``math.nan`` and callers decide what a missing amount
means for them (no filter, invalid form field, ...). Never treat it as zero.
"""
import locale
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


@dataclass(frozen=True)
class LocaleSeparators:
    decimal: str = "."
    group: str = ","


US_SEPARATORS = LocaleSeparators(decimal=".", group=",")
EU_SEPARATORS = LocaleSeparators(decimal=",", group=".")

_BLANKS = re.compile(r"[\s']")          # \s also covers thin and no-break spaces
_NOT_AMOUNT = re.compile(r"[^0-9,.-]")
_NOT_DIGIT = re.compile(r"[^0-9]")


def system_separators() -> LocaleSeparators:
    """Separators of the process locale, US style when the platform has none."""
    try:
        conv = locale.localeconv()
    except locale.Error:
        return US_SEPARATORS

    decimal = conv.get("decimal_point") or "."
    if decimal not in (".", ","):
        return US_SEPARATORS
    group = conv.get("thousands_sep") or ""
    if group not in (".", ",") or group == decimal:
        group = "." if decimal == "," else ","
    return LocaleSeparators(decimal=decimal, group=group)


def _sanitize(text: str) -> str:
    return _NOT_AMOUNT.sub("", _BLANKS.sub("", text or ""))


_CENTS = Decimal("0.01")


def _round_half_up(normalized: str) -> float:
    # rounded on the decimal text, not on the binary float
    return float(Decimal(normalized).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _digits(segment: str) -> int:
    return len(_NOT_DIGIT.sub("", segment))


def _is_decimal_candidate(parts: list) -> bool:
    # "1,500" reads as 1.5 but "100,500" is a thousands group
    if len(parts) != 2:
        return False
    head, tail = _digits(parts[0]), len(parts[1])
    return 1 <= tail <= 2 or (tail == 3 and head <= 2)


def _is_grouped(sanitized: str, mark: str) -> bool:
    parts = sanitized.lstrip("-").split(mark)
    if len(parts) < 2 or not 1 <= len(parts[0]) <= 3:
        return False
    return all(len(part) == 3 for part in parts[1:])


def _normalize(sanitized: str, separators: Optional[LocaleSeparators]) -> str:
    has_comma = "," in sanitized
    has_dot = "." in sanitized

    if has_comma and has_dot:
        decimal = "," if sanitized.rfind(",") > sanitized.rfind(".") else "."
        thousands = "." if decimal == "," else ","
        return sanitized.replace(thousands, "").replace(decimal, ".")

    if not (has_comma or has_dot):
        return sanitized

    mark = "," if has_comma else "."
    if separators is not None and mark == separators.group and _is_grouped(sanitized, mark):
        return sanitized.replace(mark, "")
    if _is_decimal_candidate(sanitized.split(mark)):
        return sanitized.replace(mark, ".")
    return sanitized.replace(mark, "")


def parse_amount(text: str, separators: Optional[LocaleSeparators] = None) -> float:
    """Parse a locale formatted amount, ``math.nan`` when it is not one.

    When both ``.`` and ``,`` appear, whichever comes last is the decimal
    mark. A lone mark is a decimal mark only when what follows it looks like
    cents. Passing the locale ``separators`` lets a lone group mark laid out
    as thousands groups ("1,234" in en-US) keep its grouping meaning.
    """
    sanitized = _sanitize(text)
    if not sanitized or "-" in sanitized[1:]:
        return math.nan

    normalized = _normalize(sanitized, separators)
    try:
        value = float(normalized)
    except ValueError:
        return math.nan
    if not math.isfinite(value):
        return math.nan

    if len(normalized.partition(".")[2]) > 2:
        return _round_half_up(normalized)
    return value


def parse_amount_filter(text: str, separators: Optional[LocaleSeparators] = None) -> Optional[float]:
    value = parse_amount(text, separators)
    return None if math.isnan(value) else value


def is_valid_amount(value) -> bool:
    if value is None:
        return False
    try:
        return not math.isnan(value)
    except TypeError:
        return False


def _group(digits: str, group: str) -> str:
    return f"{int(digits):,}".replace(",", group)


def format_amount(value: float, separators: LocaleSeparators = US_SEPARATORS) -> str:
    """Format for an input field: grouped, at most two decimals, no symbol."""
    if not is_valid_amount(value):
        return ""

    integer_part, _, decimal_part = f"{abs(value):.2f}".partition(".")
    decimal_part = decimal_part.rstrip("0")
    sign = "-" if value < 0 and (integer_part != "0" or decimal_part) else ""
    grouped = _group(integer_part, separators.group)
    if decimal_part:
        return f"{sign}{grouped}{separators.decimal}{decimal_part}"
    return f"{sign}{grouped}"


def reformat_while_typing(text: str, separators: LocaleSeparators = US_SEPARATORS) -> str:
    """Regroup the integer part after a keystroke.

    A decimal mark the user just typed survives ("1234." -> "1,234."), so
    does an unfinished decimal part. The last ``.`` or ``,`` left after
    removing group marks is taken as the decimal mark.
    """
    trimmed = _BLANKS.sub("", text or "")
    if not trimmed:
        return ""
    sanitized = re.sub(r"[^0-9.,]", "", trimmed)
    if not sanitized:
        return ""

    decimal = separators.decimal
    ends_with_separator = trimmed[-1] in ".,"
    normalized = sanitized.replace(separators.group, "")
    last = max(normalized.rfind("."), normalized.rfind(","))

    integer_raw, decimal_raw, has_decimal = normalized, "", False
    if last != -1:
        has_decimal = True
        integer_raw = normalized[:last]
        decimal_raw = _NOT_DIGIT.sub("", normalized[last + 1:])

    integer_digits = _NOT_DIGIT.sub("", integer_raw)
    if not integer_digits:
        if decimal_raw:
            return f"0{decimal}{decimal_raw}"
        return f"0{decimal}" if ends_with_separator else ""

    grouped = _group(integer_digits, separators.group)
    if decimal_raw:
        return f"{grouped}{decimal}{decimal_raw}"
    if ends_with_separator:
        return f"{grouped}{decimal}"
    if not has_decimal and sanitized.endswith(separators.group):
        return f"{grouped}{decimal}"
    return grouped
