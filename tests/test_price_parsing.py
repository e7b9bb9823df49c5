from soldcomps.pricing import UNKNOWN_SHIPPING, is_shipping_text, normalize_shipping, parse_price


def test_parse_price_blank_is_none() -> None:
    assert parse_price("") is None
    assert parse_price("   ") is None
    assert parse_price(None) is None


def test_parse_price_without_digits_is_none() -> None:
    assert parse_price("See price") is None


def test_parse_price_with_commas() -> None:
    parsed = parse_price("$1,299.95")
    assert parsed is not None
    assert parsed.value == 1299.95
    assert parsed.currency == "USD"
    assert parsed.symbol == "$"


def test_parse_price_us_prefix() -> None:
    parsed = parse_price("US $24.99")
    assert parsed is not None
    assert parsed.value == 24.99
    assert parsed.currency == "USD"
    assert parsed.symbol == "US $"


def test_parse_price_from_range() -> None:
    parsed = parse_price("£129.99 to £159.99")
    assert parsed is not None
    assert parsed.value == 129.99
    assert parsed.currency == "GBP"


def test_parse_price_european_grouping() -> None:
    parsed = parse_price("1.299,95 €")
    assert parsed is not None
    assert parsed.value == 1299.95
    assert parsed.currency == "EUR"


def test_parse_price_currency_code_and_space_grouping() -> None:
    parsed = parse_price("CAD 12 345")
    assert parsed is not None
    assert parsed.value == 12345
    assert parsed.currency == "CAD"
    assert parsed.symbol is None


def test_parse_price_decimal_comma() -> None:
    parsed = parse_price("12,5")
    assert parsed is not None
    assert parsed.value == 12.5
    assert parsed.currency is None


def test_parse_shipping_free() -> None:
    assert normalize_shipping("Free delivery") == "0"
    assert normalize_shipping("FREE shipping, 3 bids") == "0"


def test_parse_shipping_bids_is_unknown_not_free() -> None:
    assert normalize_shipping("3 bids · 1d 4h left") == UNKNOWN_SHIPPING
    assert normalize_shipping("3 bids") != "0"


def test_parse_shipping_delivery_cost() -> None:
    assert normalize_shipping("+$5.99 delivery") == "5.99"
    assert normalize_shipping("+$5.00 delivery") == "5"
    assert normalize_shipping("+$4.35 shipping") == "4.35"


def test_parse_shipping_unparseable_delivery_defaults_to_zero() -> None:
    assert normalize_shipping("Delivery not specified") == "0"


def test_parse_shipping_pre_extracted_value() -> None:
    assert normalize_shipping({"raw": "+$4.50 delivery", "extracted": 4.5}) == "4.5"
    assert normalize_shipping({"raw": "+$7.25 shipping"}) == "7.25"


def test_parse_shipping_missing() -> None:
    assert normalize_shipping(None) == "0"
    assert normalize_shipping("") == "0"


def test_parse_price_leading_zero_is_decimal() -> None:
    parsed = parse_price("US $0.999")
    assert parsed is not None
    assert parsed.value == 0.999
    parsed = parse_price("$1.299")
    assert parsed is not None
    assert parsed.value == 1299


def test_is_shipping_text() -> None:
    assert is_shipping_text("Free delivery") is True
    assert is_shipping_text("+$5.99 shipping") is True
    assert is_shipping_text("3 bids") is True
    assert is_shipping_text("Located in United States") is False
    assert is_shipping_text("Free returns") is False
    assert is_shipping_text(None) is False
