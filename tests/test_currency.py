from ledger.currency import currency_symbol, format_currency, format_currency_compact


def test_currency_symbol_falls_back_to_code():
    assert currency_symbol("usd") == "$"
    assert currency_symbol("KZT") == "₸"
    assert currency_symbol("XYZ") == "XYZ"


def test_format_currency():
    assert format_currency(1234.5, "USD") == "$1,234.5"
    assert format_currency(-5, "USD") == "-$5"
    assert format_currency(0, "EUR") == "€0"
    assert format_currency(10, "XYZ") == "XYZ10"


def test_format_currency_compact():
    assert format_currency_compact(1234) == "+1.2k"
    assert format_currency_compact(-3_400_000) == "-3.4M"
    assert format_currency_compact(999, show_sign=False) == "999"
    assert format_currency_compact(0) == "-"
    assert format_currency_compact(1500, show_symbol=True, currency="USD") == "+$1.5k"
