"""Structured exceptions raised by the middleware layers."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class MiddlewareError(Exception):
    """Base exception for errors raised by middleware transports.

    Attributes:
        response: The last response seen before the error, if any.
    """

    def __init__(self, message: str, response: "httpx.Response | None" = None):
        super().__init__(message)
        self.response = response


class RequestCancelledError(MiddlewareError):
    """The request's context was cancelled while a retry was pending."""

    pass


class DeadlineExceededError(RequestCancelledError):
    """The request's context deadline passed while a retry was pending."""

    pass


class NoResponseError(MiddlewareError):
    """A retry predicate finished without a response or an error to report."""

    pass


class DecodingError(MiddlewareError):
    """A response body could not be decoded as its declared content type."""

    pass


class APIError(MiddlewareError):
    """Base exception for HTTP error statuses."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
    ):
        super().__init__(message, response=response)
        self.status_code = status_code


class ClientError(APIError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(APIError):
    """5xx server errors."""

    pass
