"""Retry predicates for RetryTransport.

A predicate is called exactly once after every attempt with the attempt's
response (or None), its error (or None) and whether the backoff schedule
is exhausted. It returns the error to report and whether to retry:

| Predicate | Transport errors | HTTP error statuses |
|-----------|------------------|---------------------|
| `default_should_retry` | Any exception | Never retried |
| `retry_on_network_error` | `httpx.TransportError` only | Never retried |
| `RetryOnStatus` | Any exception | Configured status codes |

Predicates may keep state in a closure, but must not touch the request or
response.
"""

from dataclasses import dataclass
from typing import Protocol

import httpx

from http_middleware_core.errors import error_for_status

# All server errors
DEFAULT_RETRY_STATUS_CODES: frozenset[int] = frozenset(range(500, 600))


class RetryPredicate(Protocol):
    def __call__(
        self,
        response: httpx.Response | None,
        error: Exception | None,
        last_attempt: bool,
    ) -> tuple[Exception | None, bool]: ...


def default_should_retry(
    response: httpx.Response | None,
    error: Exception | None,
    last_attempt: bool,
) -> tuple[Exception | None, bool]:
    """Retry any error until the schedule is exhausted; never retry a response."""
    return error, error is not None and not last_attempt


def retry_on_network_error(
    response: httpx.Response | None,
    error: Exception | None,
    last_attempt: bool,
) -> tuple[Exception | None, bool]:
    """Retry only transport-level failures (connect, read, timeout, ...)."""
    if not isinstance(error, httpx.TransportError):
        return error, False
    return error, not last_attempt


@dataclass(frozen=True)
class RetryOnStatus:
    """Retry errors and responses whose status code is in ``status_codes``.

    When the schedule runs out on a retryable status, the last response is
    returned as-is, or reported as an APIError subclass when
    ``raise_on_exhaustion`` is set.

    Example:
        ```python
        transport = RetryTransport(
            wrapped_transport=httpx.AsyncHTTPTransport(),
            should_retry=RetryOnStatus(status_codes=frozenset([502, 503, 504])),
        )
        ```
    """

    status_codes: frozenset[int] = DEFAULT_RETRY_STATUS_CODES
    raise_on_exhaustion: bool = False

    def __call__(
        self,
        response: httpx.Response | None,
        error: Exception | None,
        last_attempt: bool,
    ) -> tuple[Exception | None, bool]:
        if error is not None or response is None:
            return default_should_retry(response, error, last_attempt)

        if response.status_code not in self.status_codes:
            return None, False

        if not last_attempt:
            return None, True

        if self.raise_on_exhaustion:
            return error_for_status(response), False
        return None, False
