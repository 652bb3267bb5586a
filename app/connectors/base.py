"""
app/connectors/base.py

requests-based plumbing for outbound JSON APIs: a client-side rate limit,
retries with exponential backoff on throttling / 5xx / network errors, and
one error type for callers to map onto HTTP responses.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from app.config import ExternalHTTPSettings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class ConnectorRequestError(RuntimeError):
    """
    The upstream call failed for good; ``status_code`` is the last HTTP status seen, if any.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BaseConnector:
    source: str

    def __init__(
        self,
        *,
        source: str,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._http = http_settings
        self._session = session or requests.Session()
        rate = http_settings.rate_limit_per_second
        self._min_interval_seconds = 1.0 / rate if rate > 0 else 0.0
        self._last_sent_at = 0.0

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = self._request(method=method, url=url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(f"{self.source}: response was not valid JSON.") from exc

    def _request(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """
        Send one request, retrying up to ``max_retries`` extra times.

        Non-retryable HTTP errors (4xx other than 429) fail immediately.
        """

        attempts = self._http.max_retries + 1
        last_status: int | None = None
        last_failure: Exception | str = "no attempt made"

        for attempt in range(1, attempts + 1):
            self._apply_rate_limit()
            try:
                response = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    headers=headers,
                    timeout=self._http.timeout_seconds,
                )
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_status, last_failure = None, exc
            else:
                if response.status_code not in RETRYABLE_STATUS_CODES:
                    self._raise_for_client_error(response, url)
                    return response
                last_status, last_failure = response.status_code, f"HTTP {response.status_code}"

            if attempt == attempts:
                break
            delay = self._backoff_seconds(attempt)
            logger.warning(
                "Upstream retry source=%s attempt=%d/%d wait_seconds=%.2f reason=%s",
                self.source,
                attempt,
                attempts,
                delay,
                last_failure,
            )
            time.sleep(delay)

        logger.error("Upstream gave up source=%s url=%s reason=%s", self.source, url, last_failure)
        raise ConnectorRequestError(
            f"{self.source}: request failed after {attempts} attempt(s).",
            status_code=last_status,
        )

    def _raise_for_client_error(self, response: requests.Response, url: str) -> None:
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            logger.error(
                "Upstream rejected request source=%s status=%s url=%s",
                self.source,
                response.status_code,
                url,
            )
            raise ConnectorRequestError(
                f"{self.source} error: {response.status_code}",
                status_code=response.status_code,
            ) from exc

    def _backoff_seconds(self, attempt: int) -> float:
        return self._http.backoff_initial_seconds * (self._http.backoff_multiplier ** (attempt - 1))

    def _apply_rate_limit(self) -> None:
        if self._min_interval_seconds <= 0:
            return
        wait = self._min_interval_seconds - (time.monotonic() - self._last_sent_at)
        if wait > 0:
            time.sleep(wait)
        self._last_sent_at = time.monotonic()
