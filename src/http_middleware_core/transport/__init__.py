"""Transport layers for composable HTTP middleware.

Every layer is an httpx.AsyncBaseTransport that wraps another one, so
layers stack in any order on top of httpx.AsyncHTTPTransport.

Modules:
    retry: Retry with pluggable backoff and cancellation
    predicates: Retry predicates (network errors, status codes)
    json_decoder: JSON response decoding
    factory: Factory function for the common transport stack

Example:
    ```python
    from http_middleware_core.transport import create_transport_stack

    transport = create_transport_stack(
        backoff=ExponentialBackoff(max_elapsed_time=30),
        should_retry=RetryOnStatus(),
    )
    ```
"""

from http_middleware_core.transport.factory import create_transport_stack
from http_middleware_core.transport.json_decoder import JSONResult, JSONTransport
from http_middleware_core.transport.predicates import (
    DEFAULT_RETRY_STATUS_CODES,
    RetryOnStatus,
    RetryPredicate,
    default_should_retry,
    retry_on_network_error,
)
from http_middleware_core.transport.retry import RetryTransport

__all__ = [
    "DEFAULT_RETRY_STATUS_CODES",
    "JSONResult",
    "JSONTransport",
    "RetryOnStatus",
    "RetryPredicate",
    "RetryTransport",
    "create_transport_stack",
    "default_should_retry",
    "retry_on_network_error",
]
