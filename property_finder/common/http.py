"""HTTP client with retries, timeouts, and process-wide per-source rate gates."""

from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Callable

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from property_finder.common.constants import USER_AGENT
from property_finder.common.errors import RetryableUpstreamError, UpstreamDegraded, UpstreamUnavailable

RETRYABLE_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}

DEFAULT_MIN_INTERVALS = {
    "nominatim": 1.1,
    "overpass": 1.0,
    "osrm": 0.0,
    "reiv": 2.0,
    "listing": 0.0,
}


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 5.0
    read: float = 15.0


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    multiplier: float = 1.0
    max_wait: float = 10.0


class DelayGate:
    """Enforces a minimum delay between consecutive acquisitions."""

    def __init__(
        self,
        min_interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.min_interval = min_interval
        self.clock = clock
        self.sleep = sleep
        self.last_at: float | None = None
        self.lock = threading.Lock()

    def acquire(self) -> float:
        """Block until the gate opens; returns the seconds spent waiting."""
        with self.lock:
            waited = 0.0
            if self.last_at is not None and self.min_interval > 0:
                remaining = self.min_interval - (self.clock() - self.last_at)
                if remaining > 0:
                    self.sleep(remaining)
                    waited = remaining
            self.last_at = self.clock()
            return waited

    def reset(self) -> None:
        with self.lock:
            self.last_at = None


_GATES: dict[str, DelayGate] = {}
_GATES_LOCK = threading.Lock()


def get_gate(source_type: str) -> DelayGate:
    with _GATES_LOCK:
        gate = _GATES.get(source_type)
        if gate is None:
            gate = DelayGate(DEFAULT_MIN_INTERVALS.get(source_type, 0.0))
            _GATES[source_type] = gate
        return gate


def configure_rate_limits(intervals: dict[str, float]) -> None:
    for source_type, seconds in intervals.items():
        get_gate(source_type).min_interval = float(seconds)


def reset_gates() -> None:
    with _GATES_LOCK:
        _GATES.clear()


def parse_json_body(text: str, url: str) -> Any:
    body = (text or "").strip()
    if body.startswith("<"):
        # Rate-limit and maintenance pages come back as HTML with a 200.
        raise UpstreamDegraded(f"Upstream returned an error page instead of JSON: {url}")
    try:
        return json.loads(body)
    except ValueError as exc:
        raise UpstreamDegraded(f"Invalid JSON payload from {url}") from exc


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
        user_agent: str = USER_AGENT,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.retry = retry or RetryConfig()
        self.user_agent = user_agent
        self.session = requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _headers(self, headers: dict[str, str] | None, accept: str) -> dict[str, str]:
        out = {"User-Agent": self.user_agent, "Accept": accept}
        if headers:
            out.update(headers)
        return out

    def _raise_for_status_or_retry(self, response: requests.Response, url: str) -> None:
        status = response.status_code
        if status in RETRYABLE_STATUS_CODES:
            raise RetryableUpstreamError(f"Retryable HTTP status {status} from {url}", status_code=status)
        if not 200 <= status < 300:
            raise UpstreamUnavailable(f"HTTP status {status} from {url}", status_code=status)

    def _send(
        self,
        method: str,
        url: str,
        *,
        source_type: str,
        params: dict[str, Any] | None,
        data: dict[str, Any] | None,
        headers: dict[str, str],
        timeout: TimeoutConfig | None,
    ) -> str:
        req_timeout = timeout or self.timeout
        get_gate(source_type).acquire()
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                data=data,
                headers=headers,
                timeout=(req_timeout.connect, req_timeout.read),
            )
        except requests.Timeout as exc:
            raise UpstreamUnavailable(f"Timed out calling {url}") from exc
        except requests.RequestException as exc:
            raise UpstreamUnavailable(f"Request to {url} failed: {exc}") from exc
        self._raise_for_status_or_retry(response, url)
        return response.text

    def request_text(
        self,
        method: str,
        url: str,
        *,
        source_type: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        accept: str = "application/json",
        timeout: TimeoutConfig | None = None,
    ) -> str:
        merged_headers = self._headers(headers, accept)

        @retry(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.retry.multiplier,
                max=self.retry.max_wait,
                jitter=1.0,
            ),
            retry=retry_if_exception_type(RetryableUpstreamError),
            reraise=True,
        )
        def _wrapped() -> str:
            return self._send(
                method,
                url,
                source_type=source_type,
                params=params,
                data=data,
                headers=merged_headers,
                timeout=timeout,
            )

        return _wrapped()

    def get_json(
        self,
        url: str,
        *,
        source_type: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> Any:
        text = self.request_text("GET", url, source_type=source_type, params=params, headers=headers, timeout=timeout)
        return parse_json_body(text, url)

    def post_form_json(
        self,
        url: str,
        *,
        source_type: str,
        data: dict[str, Any],
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> Any:
        merged = {"Content-Type": "application/x-www-form-urlencoded"}
        if headers:
            merged.update(headers)
        text = self.request_text("POST", url, source_type=source_type, data=data, headers=merged, timeout=timeout)
        return parse_json_body(text, url)

    def get_html(
        self,
        url: str,
        *,
        source_type: str,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> str:
        return self.request_text(
            "GET",
            url,
            source_type=source_type,
            headers=headers,
            accept="text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            timeout=timeout,
        )
