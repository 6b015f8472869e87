"""Testing utilities for middleware transports.

RecordingTransport stands in for a base transport: it runs a handler for
every attempt and records what it saw, including how many attempts were
ever in flight at once.

Example:
    ```python
    from http_middleware_core.testing import RecordingTransport, failing_handler


    async def test_gives_up():
        base = RecordingTransport(failing_handler("connection refused"))
        transport = RetryTransport(wrapped_transport=base, backoff=MaxRetries(ConstantBackoff(0), 2))
        ...
        assert base.attempts == 3
    ```
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable

import httpx

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class RecordingTransport(httpx.AsyncBaseTransport):
    """Base transport that delegates to ``handler`` and records every attempt.

    Attributes:
        requests: Requests received, in order
        attempts: Number of attempts made
        max_in_flight: Highest number of attempts running concurrently
    """

    def __init__(self, handler: Handler, latency: float = 0.0) -> None:
        self._handler = handler
        self._latency = latency
        self._in_flight = 0
        self.requests: list[httpx.Request] = []
        self.max_in_flight = 0

    @property
    def attempts(self) -> int:
        return len(self.requests)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            if self._latency:
                await asyncio.sleep(self._latency)
            response = self._handler(request)
            if inspect.isawaitable(response):
                response = await response
            return response
        finally:
            self._in_flight -= 1


def failing_handler(message: str = "connection refused") -> Handler:
    """Handler that always fails with httpx.ConnectError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError(message, request=request)

    return handler


def sequence_handler(*outcomes: httpx.Response | Exception) -> Handler:
    """Handler that plays ``outcomes`` in order, repeating the last one.

    Exceptions are raised, responses are returned.
    """
    if not outcomes:
        raise ValueError("sequence_handler needs at least one outcome")
    remaining = list(outcomes)

    def handler(request: httpx.Request) -> httpx.Response:
        outcome = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return handler


__all__ = [
    "Handler",
    "RecordingTransport",
    "failing_handler",
    "sequence_handler",
]
