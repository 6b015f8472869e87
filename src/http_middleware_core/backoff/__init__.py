"""Backoff policies that drive the retry transport.

Example:
    ```python
    from http_middleware_core.backoff import ExponentialBackoff, MaxRetries

    backoff = MaxRetries(ExponentialBackoff(initial_interval=0.1), max_retries=5)
    ```
"""

from http_middleware_core.backoff.policy import (
    STOP,
    BackoffPolicy,
    ConstantBackoff,
    ExponentialBackoff,
    MaxRetries,
    StopBackoff,
)

__all__ = [
    "STOP",
    "BackoffPolicy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "MaxRetries",
    "StopBackoff",
]
