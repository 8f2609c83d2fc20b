import pytest

from property_finder.listing import fields


def test_price_range_takes_lower_bound():
    assert fields.price_from_dollar_range("<div>$1,100,000 - $1,210,000</div>") == 1100000


def test_price_million_shorthand():
    assert fields.price_from_million_shorthand("Offers over $1.1m") == 1100000


def test_price_skips_out_of_range_tokens():
    html = "Deposit $500 then $750,000"
    assert fields.price_from_dollar_range(html) == 750000


def test_price_structured_field():
    assert fields.price_from_structured_field('{"price": 685000}') == 685000
    assert fields.price_from_structured_field('{"price": 5}') is None


def test_first_price_respects_strategy_order():
    html = '{"price": 900000} $1.2m'
    strategies = (fields.price_from_million_shorthand, fields.price_from_structured_field)
    assert fields.first_price(html, strategies) == 1200000
    assert fields.first_price("nothing here", strategies) is None


@pytest.mark.parametrize(
    ("html", "expected"),
    [
        ("3 Beds 2 Baths 1 Parking", (3, 2, 1)),
        ("4 bedroom, 1 bathroom, 2 car", (4, 1, 2)),
        ("no features listed", (None, None, None)),
    ],
)
def test_room_counts(html, expected):
    assert (fields.bedrooms(html), fields.bathrooms(html), fields.parking(html)) == expected


def test_property_type_and_amenities():
    html = "<span>townhouse</span> with courtyard"
    assert fields.property_type(html) == "Townhouse"
    assert fields.garden(html) == "yes"
    assert fields.pool(html) == "unknown"


def test_display_address_falls_back_to_suburb():
    assert fields.display_address("<title>1 Main St, Geelong | Domain</title>", "Geelong") == "1 Main St, Geelong"
    assert fields.display_address("<title>Hi</title>", "Geelong") == "Geelong, VIC"
    assert fields.display_address("", None) == "Unknown"


def test_looks_blocked_only_for_short_challenge_pages():
    assert fields.looks_blocked("<p>Please complete the captcha</p>")
    assert not fields.looks_blocked("<p>captcha</p>" + "x" * 6000)
    assert not fields.looks_blocked("<p>4 Beds</p>")


@pytest.mark.parametrize(
    "html, expected",
    [
        ("$10,000", 10000),
        ("$50,000,000", 50000000),
        ("$9,999", None),
        ("$50,000,001", None),
    ],
)
def test_price_range_bounds_are_inclusive(html, expected):
    assert fields.price_from_dollar_range(html) == expected
