import pytest

from property_finder.cli import error_payload, parse_args
from property_finder.common.errors import BlockedOrChallenged, UpstreamUnavailable


def test_parse_args_defaults():
    args = parse_args(["geocode"])
    assert args.command == "geocode"
    assert args.config_dir == "./config"
    assert args.overlay_config_dir is None
    assert args.limit is None
    assert args.strict is False
    assert args.with_units is False


def test_parse_args_accepts_overlay_config_dir():
    args = parse_args(["all", "--overlay-config-dir", "config/live"])
    assert args.overlay_config_dir == "config/live"


def test_parse_args_lookup_target_and_coordinates():
    args = parse_args(["stops", "--lat", "-37.65", "--lon", "145.08"])
    assert (args.lat, args.lon) == (-37.65, 145.08)
    assert parse_args(["price", "avondale%20heights"]).target == "avondale%20heights"


def test_parse_args_rejects_unknown_command_and_bad_limit():
    with pytest.raises(SystemExit):
        parse_args(["harvest"])
    with pytest.raises(SystemExit):
        parse_args(["prices", "--limit", "0"])


def test_error_payload_for_blocked_listing_offers_manual_form():
    exc = BlockedOrChallenged("blocked", suggested_suburb="South Morang", guidance="Use the manual form.")

    assert error_payload(exc) == {
        "error": "Use the manual form.",
        "errorCode": "BLOCKED_OR_CHALLENGED",
        "useManualForm": True,
        "suggestedSuburb": "South Morang",
    }


def test_error_payload_for_upstream_failure():
    payload = error_payload(UpstreamUnavailable("Timed out calling x"))
    assert payload == {"error": "Timed out calling x", "errorCode": "UPSTREAM_UNAVAILABLE"}
