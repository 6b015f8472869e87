"""HTTP Middleware Core - composable transport layers for httpx clients.

This library provides transport decorators that stack on any httpx async
transport:
- Retries with pluggable backoff schedules and retry predicates
- Request-scoped cancellation and deadlines
- JSON response decoding and JSON request building
- Testing utilities for transports

Example:
    ```python
    import httpx

    from http_middleware_core import ExponentialBackoff, RequestContext, new_request, with_context
    from http_middleware_core.transport import RetryTransport

    transport = RetryTransport(
        wrapped_transport=httpx.AsyncHTTPTransport(),
        backoff=ExponentialBackoff(max_elapsed_time=10),
    )

    async with httpx.AsyncClient(transport=transport) as client:
        request = new_request("GET", "https://api.example.com", with_context(RequestContext(timeout=30)))
        response = await client.send(request)
    ```
"""

from http_middleware_core.backoff import STOP, BackoffPolicy, ConstantBackoff, ExponentialBackoff, MaxRetries, StopBackoff
from http_middleware_core.context import CONTEXT_EXTENSION, RequestContext, attach_context, get_context
from http_middleware_core.request import body, new_request, query, with_context

__version__ = "0.1.0"

__all__ = [
    "CONTEXT_EXTENSION",
    "STOP",
    "BackoffPolicy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "MaxRetries",
    "RequestContext",
    "StopBackoff",
    "__version__",
    "attach_context",
    "body",
    "get_context",
    "new_request",
    "query",
    "with_context",
]
