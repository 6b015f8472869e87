"""Status code classification for HTTP responses."""

import httpx

from http_middleware_core.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
)

_EXCEPTION_MAP: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    429: RateLimitError,
}


def error_for_status(response: httpx.Response) -> APIError | None:
    """Build the exception matching an HTTP error response.

    Safe to call from inside a transport: an unread body is never read,
    it is simply left out of the message.

    Args:
        response: HTTP response object

    Returns:
        APIError subclass instance, or None for 2xx responses
    """
    if response.is_success:
        return None

    status_code = response.status_code

    if status_code in _EXCEPTION_MAP:
        exc_class = _EXCEPTION_MAP[status_code]
    elif 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = APIError

    message = f"HTTP {status_code}"
    if response.reason_phrase:
        message += f" {response.reason_phrase}"
    try:
        response_text = response.text[:200]
    except httpx.ResponseNotRead:
        response_text = ""
    if response_text:
        message += f": {response_text}"

    if exc_class is RateLimitError:
        return RateLimitError(
            message,
            retry_after=_parse_retry_after(response),
            status_code=status_code,
            response=response,
        )

    return exc_class(message, status_code=status_code, response=response)


def raise_for_status(response: httpx.Response) -> None:
    """Raise the exception matching an HTTP error response.

    Raises:
        APIError subclass based on status code
    """
    error = error_for_status(response)
    if error is not None:
        raise error


def _parse_retry_after(response: httpx.Response) -> int | None:
    retry_after = response.headers.get("retry-after")
    if retry_after is None:
        return None
    try:
        return int(retry_after)
    except ValueError:
        # HTTP-date form is not interpreted here
        return None
