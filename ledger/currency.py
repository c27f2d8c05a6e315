"""Display helpers for money.

Everything is shown en-US style ("$1,234.5") whatever the device locale, so
totals look the same for every user. No conversion happens here.
"""
from typing import Optional

from ledger.amounts import US_SEPARATORS, format_amount, is_valid_amount

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
    "AUD": "A$",
    "CAD": "C$",
    "CHF": "CHF",
    "HKD": "HK$",
    "SGD": "S$",
    "NZD": "NZ$",
    "KRW": "₩",
    "INR": "₹",
    "MXN": "MX$",
    "BRL": "R$",
    "ZAR": "R",
    "SEK": "kr",
    "NOK": "kr",
    "DKK": "kr",
    "PLN": "zł",
    "THB": "฿",
    "IDR": "Rp",
    "MYR": "RM",
    "PHP": "₱",
    "VND": "₫",
    "TWD": "NT$",
    "RUB": "₽",
    "TRY": "₺",
    "KZT": "₸",
}


def currency_symbol(code: str) -> str:
    code = (code or "").upper()
    return CURRENCY_SYMBOLS.get(code, code)


def format_currency(value: float, currency: str) -> str:
    if not is_valid_amount(value):
        return ""
    number = format_amount(abs(value), US_SEPARATORS)
    sign = "-" if value < 0 and number not in ("0", "") else ""
    return f"{sign}{currency_symbol(currency)}{number}"


def format_currency_compact(
    value: float,
    show_sign: bool = True,
    show_symbol: bool = False,
    currency: Optional[str] = None,
) -> str:
    """Short form for charts: "+1.2k", "-3.4M", "-" for zero."""
    if value == 0:
        return format_currency(0, currency) if show_symbol and currency else "-"

    magnitude = abs(value)
    if show_sign:
        sign = "+" if value > 0 else "-"
    else:
        sign = "-" if value < 0 else ""
    prefix = currency_symbol(currency) if show_symbol and currency else ""

    if magnitude >= 1_000_000:
        return f"{sign}{prefix}{magnitude / 1_000_000:.1f}M"
    if magnitude >= 1_000:
        return f"{sign}{prefix}{magnitude / 1_000:.1f}k"
    return f"{sign}{prefix}{magnitude:.0f}"
