"""Error taxonomy for middleware transports."""

from http_middleware_core.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    DeadlineExceededError,
    DecodingError,
    ForbiddenError,
    MiddlewareError,
    NoResponseError,
    NotFoundError,
    RateLimitError,
    RequestCancelledError,
    ServerError,
    UnauthorizedError,
)
from http_middleware_core.errors.handler import error_for_status, raise_for_status

__all__ = [
    "APIError",
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "DeadlineExceededError",
    "DecodingError",
    "ForbiddenError",
    "MiddlewareError",
    "NoResponseError",
    "NotFoundError",
    "RateLimitError",
    "RequestCancelledError",
    "ServerError",
    "UnauthorizedError",
    "error_for_status",
    "raise_for_status",
]
