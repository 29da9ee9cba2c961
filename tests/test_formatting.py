from alphavault.core.formatting import format_change, format_number, format_price


def test_format_number_suffixes():
    assert format_number(2_500_000_000) == "2.50B"
    assert format_number(1_000_000) == "1.00M"
    assert format_number(1_500, decimals=1) == "1.5K"
    assert format_number(12.5) == "12.50"


def test_format_price_precision():
    assert format_price(0.001234) == "$0.001234"
    assert format_price(0.5) == "$0.5000"
    assert format_price(64000) == "$64000.00"


def test_format_change_sign():
    assert format_change(1.234) == "+1.23%"
    assert format_change(-0.5) == "-0.50%"
