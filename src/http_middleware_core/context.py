"""Request-scoped cancellation for middleware transports.

A RequestContext travels with an httpx.Request in its ``extensions`` and
lets the caller abandon pending retries, either explicitly with cancel()
or by letting a deadline pass. Every layer reads the context from the
request it was handed, so cancelling the outer request stops all of them.

Example:
    ```python
    from http_middleware_core.context import RequestContext

    context = RequestContext(timeout=30)
    request = client.build_request("GET", url, extensions={CONTEXT_EXTENSION: context})
    task = asyncio.create_task(client.send(request))
    ...
    context.cancel("user navigated away")
    ```
"""

import asyncio
import time
from collections.abc import Callable

import httpx

from http_middleware_core.errors import DeadlineExceededError, RequestCancelledError

CONTEXT_EXTENSION = "request_context"


class RequestContext:
    """Cancellation signal with an optional deadline.

    Cancellation is cooperative: it is observed by code awaiting wait() or
    polling done(). The context must be used from the event loop that runs
    the request.

    Args:
        timeout: Seconds from now until the deadline passes. None means no deadline.
        clock: Monotonic time source used for the deadline.
    """

    def __init__(self, timeout: float | None = None, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._deadline = None if timeout is None else clock() + timeout
        self._event = asyncio.Event()
        self._cancel_reason: str | None = None
        self._expired = False

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def remaining(self) -> float | None:
        """Seconds left until the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def cancel(self, reason: str = "request cancelled") -> None:
        """Cancel the context. Later calls keep the first reason.

        Has no effect on the reported error once the deadline has passed.
        """
        if self.error() is None:
            self._cancel_reason = reason
        self._event.set()

    def done(self) -> bool:
        return self.error() is not None

    def error(self) -> RequestCancelledError | None:
        """Return the terminal error, or None while the context is live.

        A new exception instance is returned on every call.
        """
        if self._cancel_reason is None and not self._expired:
            if self._deadline is not None and self._clock() >= self._deadline:
                self._expire()
            else:
                return None
        if self._expired:
            return DeadlineExceededError("request deadline exceeded")
        return RequestCancelledError(self._cancel_reason)

    async def wait(self) -> RequestCancelledError:
        """Wait until the context is cancelled or its deadline passes."""
        error = self.error()
        if error is not None:
            return error

        remaining = self.remaining()
        if remaining is None:
            await self._event.wait()
        else:
            try:
                await asyncio.wait_for(self._event.wait(), timeout=remaining)
            except asyncio.TimeoutError:
                self._expire()
        return self.error()

    def _expire(self) -> None:
        if self._cancel_reason is None:
            self._expired = True
        self._event.set()


def attach_context(request: httpx.Request, context: RequestContext) -> httpx.Request:
    """Attach a context to a request, returning the same request."""
    request.extensions[CONTEXT_EXTENSION] = context
    return request


def get_context(request: httpx.Request) -> RequestContext | None:
    return request.extensions.get(CONTEXT_EXTENSION)
