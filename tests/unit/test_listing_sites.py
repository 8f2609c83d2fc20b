import pytest

from property_finder.listing.sites import DomainSite, RealestateSite, site_for_url


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://www.domain.com.au/south-morang-vic-3752-2020549940", "South Morang"),
        ("https://www.domain.com.au/geelong-vic-3220-2019000001?ref=search", "Geelong"),
        ("https://www.domain.com.au/project/1234", None),
    ],
)
def test_domain_suburb_from_url(url, expected):
    assert DomainSite().suburb_from_url(url) == expected


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://www.realestate.com.au/property-house-vic-richmond-143000001", "Richmond"),
        ("https://www.realestate.com.au/property-unit-vic-st+kilda-143000002", "St Kilda"),
        ("https://www.realestate.com.au/buy/in-richmond/list-1", None),
    ],
)
def test_realestate_suburb_from_url(url, expected):
    assert RealestateSite().suburb_from_url(url) == expected


def test_realestate_property_type_from_url():
    site = RealestateSite()
    assert site.property_type_from_url("https://www.realestate.com.au/property-unit-vic-richmond-1") == "Unit"
    assert site.property_type_from_url("https://www.realestate.com.au/property-townhouse-vic-kew-1") == "Townhouse"
    assert site.property_type_from_url("https://www.realestate.com.au/property-house-vic-kew-1") == "House"
    assert site.property_type_from_url("https://www.realestate.com.au/property-land-vic-kew-1") is None


def test_site_for_url_matches_host_suffix_only():
    assert site_for_url("https://www.domain.com.au/x-vic-3000-1").name == "domain"
    assert site_for_url("https://realestate.com.au/property-house-vic-kew-1").name == "realestate"
    assert site_for_url("https://notdomain.com.au.evil.example/x") is None
    assert site_for_url("https://example.com/domain.com.au") is None
