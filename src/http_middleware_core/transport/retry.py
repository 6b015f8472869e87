"""Retry transport for resilient HTTP clients.

RetryTransport wraps any httpx async transport and re-sends failed requests
on a backoff schedule. Two pieces are pluggable:

- ``backoff``: a BackoffPolicy, cloned at the start of every request so that
  concurrent requests never share a schedule
- ``should_retry``: a RetryPredicate deciding, after every attempt, whether
  to try again and which error to report

Waits between attempts race the request's RequestContext: cancelling the
context (or letting its deadline pass) abandons the pending retry at once.

## Example

```python
from http_middleware_core.backoff import ExponentialBackoff
from http_middleware_core.transport.predicates import RetryOnStatus
from http_middleware_core.transport.retry import RetryTransport
import httpx

retry_transport = RetryTransport(
    wrapped_transport=httpx.AsyncHTTPTransport(),
    backoff=ExponentialBackoff(max_elapsed_time=30),
    should_retry=RetryOnStatus(),
)

async with httpx.AsyncClient(transport=retry_transport) as client:
    response = await client.get("https://api.example.com")
```

A predicate that keeps asking to retry after the schedule is exhausted
loops with zero delay; termination is always the predicate's decision.
"""

import asyncio
import logging

import httpx

from http_middleware_core.backoff import STOP, BackoffPolicy, ExponentialBackoff
from http_middleware_core.context import RequestContext, get_context
from http_middleware_core.errors import NoResponseError, RequestCancelledError
from http_middleware_core.transport.predicates import RetryPredicate, default_should_retry

logger = logging.getLogger(__name__)


class RetryTransport(httpx.AsyncBaseTransport):
    """Transport that retries requests on a configurable backoff schedule.

    Attempts for one request are strictly sequential. The transport itself
    holds no per-request state and is safe to share between concurrent
    requests.

    Args:
        wrapped_transport: The underlying transport to wrap
        backoff: Backoff configuration (default: ExponentialBackoff())
        should_retry: Retry predicate (default: retry any error, never a response)

    Example:
        ```python
        transport = RetryTransport(
            wrapped_transport=httpx.AsyncHTTPTransport(),
            backoff=MaxRetries(ConstantBackoff(0.5), max_retries=3),
        )
        ```
    """

    def __init__(
        self,
        *,
        wrapped_transport: httpx.AsyncBaseTransport,
        backoff: BackoffPolicy | None = None,
        should_retry: RetryPredicate | None = None,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.backoff = backoff if backoff is not None else ExponentialBackoff()
        self.should_retry = should_retry or default_should_retry

    async def __aenter__(self):
        """Enter async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to wrapped transport."""
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request, retrying until the predicate says stop.

        Args:
            request: The HTTP request to send

        Returns:
            The response of the final attempt

        Raises:
            Exception: The error reported by the predicate for the final attempt
            RequestCancelledError: The request context finished while waiting to retry
            NoResponseError: The predicate reported neither a response nor an error
        """
        schedule = self.backoff.clone()
        context = get_context(request)
        attempt = 0

        while True:
            attempt += 1
            response: httpx.Response | None = None
            error: Exception | None = None
            try:
                response = await self._wrapped_transport.handle_async_request(request)
            except Exception as e:
                error = e

            delay = schedule.next_interval()
            last_attempt = delay is STOP
            error, retry = self.should_retry(response, error, last_attempt)

            if not retry:
                if error is not None:
                    logger.debug(f"Request {request.method} {request.url} gave up after {attempt} attempt(s): {error}")
                    if response is not None and getattr(error, "response", None) is not response:
                        await response.aclose()
                    raise error
                if response is None:
                    raise NoResponseError(f"Retry predicate reported neither a response nor an error for {request.url}")
                return response

            delay = delay or 0.0
            if error is not None:
                reason = error
            elif response is not None:
                reason = response.status_code
            else:
                reason = "no response"
            logger.warning(
                f"Request {request.method} {request.url} failed with {reason}, "
                f"retrying in {delay:.2f}s (attempt {attempt})"
            )

            cancelled = await _sleep_or_cancel(delay, context)
            if cancelled is not None:
                logger.debug(f"Request {request.method} {request.url} cancelled while waiting to retry: {cancelled}")
                cancelled.response = response
                raise cancelled from error

            if response is not None:
                await response.aclose()


async def _sleep_or_cancel(delay: float, context: RequestContext | None) -> RequestCancelledError | None:
    """Wait for ``delay`` seconds unless the context finishes first.

    Returns:
        The context's error if it won the race, otherwise None
    """
    if context is None:
        await asyncio.sleep(delay)
        return None

    error = context.error()
    if error is not None:
        return error

    try:
        return await asyncio.wait_for(context.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return None
