"""Factory for the common transport stack."""

from typing import Any

import httpx

from http_middleware_core.backoff import BackoffPolicy
from http_middleware_core.transport.json_decoder import JSONResult, JSONTransport
from http_middleware_core.transport.predicates import RetryPredicate
from http_middleware_core.transport.retry import RetryTransport


def create_transport_stack(
    *,
    base_transport: httpx.AsyncBaseTransport | None = None,
    backoff: BackoffPolicy | None = None,
    should_retry: RetryPredicate | None = None,
    enable_retry: bool = True,
    json_result: JSONResult | None = None,
    **transport_kwargs: Any,
) -> httpx.AsyncBaseTransport:
    """Build a layered transport: JSON decoding over retries over the base transport.

    Args:
        base_transport: Innermost transport (default: httpx.AsyncHTTPTransport(**transport_kwargs))
        backoff: Backoff configuration for the retry layer
        should_retry: Retry predicate for the retry layer
        enable_retry: Whether to add the retry layer
        json_result: If given, add a JSON decoding layer storing into it
        **transport_kwargs: Passed to httpx.AsyncHTTPTransport when no base transport is given

    Returns:
        The outermost transport

    Example:
        ```python
        result = JSONResult()
        transport = create_transport_stack(
            backoff=ExponentialBackoff(max_elapsed_time=10),
            json_result=result,
            http2=False,
        )
        ```
    """
    if base_transport is not None and transport_kwargs:
        raise TypeError("transport_kwargs cannot be combined with base_transport")

    transport = base_transport if base_transport is not None else httpx.AsyncHTTPTransport(**transport_kwargs)

    if enable_retry:
        transport = RetryTransport(wrapped_transport=transport, backoff=backoff, should_retry=should_retry)

    if json_result is not None:
        transport = JSONTransport(wrapped_transport=transport, result=json_result)

    return transport
