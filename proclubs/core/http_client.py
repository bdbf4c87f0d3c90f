from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import threading
import time
from typing import Any, Callable, Iterable, Mapping, Union

import requests

from proclubs.config.settings import settings


RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

HeaderProvider = Callable[[], dict[str, str]]
QueryParams = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]


class HttpTransportError(RuntimeError):
    """No usable HTTP response was obtained (network failure, timeout or deadline)."""


class HttpCancelledError(HttpTransportError):
    pass


def _loggable_params(params: QueryParams | None) -> dict[str, Any]:
    if not params:
        return {}
    items = params.items() if isinstance(params, Mapping) else params
    loggable: dict[str, Any] = {}
    for key, value in items:
        if key in loggable:
            existing = loggable[key]
            loggable[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            loggable[key] = value
    return loggable


class HttpClient:
    def __init__(
        self,
        *,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_factor: float | None = None,
        header_provider: HeaderProvider | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = settings.HTTP_TIMEOUT_SECONDS if timeout is None else timeout
        self.max_retries = settings.HTTP_MAX_RETRIES if max_retries is None else max_retries
        self.backoff_factor = settings.HTTP_BACKOFF_FACTOR if backoff_factor is None else backoff_factor
        self.header_provider = header_provider
        self.session = session or requests.Session()
        self.logger = logging.getLogger(self.__class__.__name__)

    def get(
        self,
        url: str,
        *,
        params: QueryParams | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> requests.Response:
        """Issue a GET and return the final response, whatever its status.

        Transport failures and retryable statuses are retried with exponential
        backoff. ``timeout`` bounds the whole call, retries included.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        merged_headers = {**(self.header_provider() if self.header_provider else {}), **(headers or {})}
        last_error: Exception | None = None

        for attempt in range(self.max_retries + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise HttpCancelledError(f"HTTP GET cancelled url={url}")
            attempt_timeout = self._attempt_timeout(url, deadline)
            started = time.perf_counter()
            try:
                response = self.session.get(
                    url,
                    headers=merged_headers,
                    params=params,
                    timeout=attempt_timeout,
                )
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc
                self._log(
                    event="http_get_error",
                    url=url,
                    status_code=None,
                    attempt=attempt,
                    duration_ms=int((time.perf_counter() - started) * 1000),
                    params=params,
                    error=type(exc).__name__,
                )
                if attempt < self.max_retries and self._wait(
                    self.backoff_factor * (2**attempt), deadline, cancel_event
                ):
                    continue
                raise HttpTransportError(f"HTTP GET network failure url={url}: {exc}") from exc
            except requests.RequestException as exc:
                raise HttpTransportError(f"HTTP GET failed url={url}: {exc}") from exc

            self._log(
                event="http_get",
                url=url,
                status_code=response.status_code,
                attempt=attempt,
                duration_ms=int((time.perf_counter() - started) * 1000),
                params=params,
            )

            if response.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                sleep_seconds = self._retry_after_seconds(response.headers.get("Retry-After"), attempt)
                if self._wait(sleep_seconds, deadline, cancel_event):
                    continue
            return response

        raise HttpTransportError(f"HTTP GET exhausted retries url={url} error={last_error}")

    def _attempt_timeout(self, url: str, deadline: float | None) -> float:
        if deadline is None:
            return self.timeout
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise HttpTransportError(f"HTTP GET deadline exceeded url={url}")
        return min(self.timeout, remaining)

    def _wait(self, seconds: float, deadline: float | None, cancel_event: threading.Event | None) -> bool:
        # False means the backoff would overrun the deadline and the caller should stop retrying.
        if deadline is not None and time.monotonic() + seconds >= deadline:
            return False
        if cancel_event is None:
            time.sleep(seconds)
            return True
        if cancel_event.wait(seconds):
            raise HttpCancelledError("HTTP GET cancelled during backoff")
        return True

    def _retry_after_seconds(self, retry_after: str | None, attempt: int) -> float:
        if retry_after and retry_after.isdigit():
            return float(retry_after)
        return self.backoff_factor * (2**attempt)

    def _log(
        self,
        *,
        event: str,
        url: str,
        status_code: int | None,
        attempt: int,
        duration_ms: int,
        params: QueryParams | None,
        error: str | None = None,
    ) -> None:
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "url": url,
            "status_code": status_code,
            "attempt": attempt,
            "duration_ms": duration_ms,
            "params": _loggable_params(params),
            "error": error,
        }
        self.logger.info(json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str))
