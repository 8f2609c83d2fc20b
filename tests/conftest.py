from __future__ import annotations

import pytest

from property_finder.common.http import configure_rate_limits, reset_gates


@pytest.fixture(autouse=True)
def no_rate_limit_sleeps():
    reset_gates()
    configure_rate_limits({"nominatim": 0, "overpass": 0, "osrm": 0, "reiv": 0, "listing": 0})
    yield
    reset_gates()


class FakeClient:
    """Duck-typed stand-in for HttpClient that serves canned responses and records calls."""

    def __init__(self, *, json_responses=None, html_responses=None, post_responses=None):
        self.json_responses = json_responses or {}
        self.html_responses = html_responses or {}
        self.post_responses = post_responses or {}
        self.calls: list[tuple[str, str, dict]] = []

    @staticmethod
    def _answer(table, url, kwargs):
        for prefix, value in table.items():
            if url.startswith(prefix):
                if callable(value):
                    value = value(url, kwargs)
                if isinstance(value, Exception):
                    raise value
                return value
        raise AssertionError(f"unexpected request: {url}")

    def get_json(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return self._answer(self.json_responses, url, kwargs)

    def get_html(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return self._answer(self.html_responses, url, kwargs)

    def post_form_json(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs))
        return self._answer(self.post_responses, url, kwargs)

    def close(self):
        return None


@pytest.fixture
def fake_client_factory():
    return FakeClient
