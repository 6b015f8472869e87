"""JSON response decoding as a transport layer.

JSONTransport decodes ``application/json`` response bodies into a
caller-supplied JSONResult and passes every other response through
untouched. Because it is an ordinary transport it chains with the
retry layer in either order:

```python
result = JSONResult()
transport = JSONTransport(
    wrapped_transport=RetryTransport(wrapped_transport=httpx.AsyncHTTPTransport()),
    result=result,
)
async with httpx.AsyncClient(transport=transport) as client:
    await client.get("https://api.example.com/items")
print(result.value)
```

Decoding happens above the retry layer, so a DecodingError is never retried.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

import httpx

from http_middleware_core.errors import DecodingError

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"

_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_QUOTED = r'"(?:[^"\\]|\\.)*"'
_MEDIA_TYPE_RE = re.compile(rf"\s*({_TOKEN}/{_TOKEN})\s*")
# One "; name=value" parameter; a bare ";" is tolerated
_PARAMETER_RE = re.compile(rf";\s*(?:{_TOKEN}\s*=\s*(?:{_TOKEN}|{_QUOTED})\s*)?")


@dataclass
class JSONResult:
    """Destination for a decoded JSON body."""

    value: Any = None


class JSONTransport(httpx.AsyncBaseTransport):
    """Transport that decodes JSON responses into ``result``.

    Args:
        wrapped_transport: The underlying transport to wrap
        result: Where the decoded body is stored
    """

    def __init__(self, *, wrapped_transport: httpx.AsyncBaseTransport, result: JSONResult) -> None:
        self._wrapped_transport = wrapped_transport
        self.result = result

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
        """Send the request and decode a JSON response body.

        The body is buffered, so it stays readable on the returned response.

        Raises:
            DecodingError: If a JSON response body is not valid JSON
        """
        response = await self._wrapped_transport.handle_async_request(request)

        if media_type(response.headers.get("content-type", "")) != JSON_MEDIA_TYPE:
            return response

        content = await response.aread()
        try:
            self.result.value = json.loads(content)
        except ValueError as e:
            # UnicodeDecodeError is a ValueError too
            raise DecodingError(f"Invalid JSON body from {request.method} {request.url}: {e}", response=response) from e

        logger.debug(f"Decoded JSON body from {request.method} {request.url}")
        return response


def media_type(content_type: str) -> str:
    """Return the lower-cased media type of a Content-Type value, without parameters.

    Returns an empty string when the value is empty or malformed, including
    malformed parameters such as ``application/json; charset``.
    """
    match = _MEDIA_TYPE_RE.match(content_type)
    if match is None:
        return ""
    position = match.end()
    while position < len(content_type):
        parameter = _PARAMETER_RE.match(content_type, position)
        if parameter is None:
            return ""
        position = parameter.end()
    return match.group(1).lower()
