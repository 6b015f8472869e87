"""Composable request construction.

new_request builds an httpx.Request from a method, a URL and any number of
options. An option is a callable that receives the request built so far
and returns it, either mutated or replaced:

```python
request = new_request(
    "GET",
    "https://api.example.com/search?page=2",
    query({"q": "retry", "tag": ["http", "async"]}),
    body({"hey": "Hey!"}),
    with_context(RequestContext(timeout=10)),
)
```
"""

import dataclasses
import json
from collections.abc import Callable, Iterator, Mapping
from typing import Any

import httpx

from http_middleware_core.context import RequestContext, attach_context

RequestOption = Callable[[httpx.Request], httpx.Request]

# Recomputed by httpx whenever the body changes
_BODY_HEADERS = ("Content-Length", "Transfer-Encoding")


def new_request(method: str, url: httpx.URL | str, *options: RequestOption) -> httpx.Request:
    """Create a request and apply ``options`` in order.

    Raises:
        Whatever the first failing option raises
    """
    request = httpx.Request(method, url)
    for option in options:
        request = option(request)
    return request


def body(value: Any) -> RequestOption:
    """Use the JSON encoding of ``value`` as the request body.

    Sets Content-Type to application/json; non-ASCII characters are not escaped.
    """

    def apply(request: httpx.Request) -> httpx.Request:
        content = json.dumps(value, ensure_ascii=False).encode("utf-8")
        headers = httpx.Headers(request.headers)
        for name in _BODY_HEADERS:
            headers.pop(name, None)
        headers["Content-Type"] = "application/json"
        return httpx.Request(
            request.method,
            request.url,
            headers=headers,
            content=content,
            extensions=request.extensions,
        )

    return apply


def query(value: Mapping[str, Any] | Any) -> RequestOption:
    """Add URL query parameters from a mapping or a dataclass instance.

    Existing query values are kept. None values are skipped and lists or
    tuples become repeated keys.

    Raises:
        TypeError: If ``value`` is neither a mapping nor a dataclass instance
    """

    def apply(request: httpx.Request) -> httpx.Request:
        params = request.url.params.multi_items()
        params.extend(_query_items(value))
        request.url = request.url.copy_with(params=httpx.QueryParams(params))
        return request

    return apply


def with_context(context: RequestContext) -> RequestOption:
    """Attach a cancellation context to the request."""

    def apply(request: httpx.Request) -> httpx.Request:
        return attach_context(request, context)

    return apply


def _query_items(value: Any) -> Iterator[tuple[str, Any]]:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    if not isinstance(value, Mapping):
        raise TypeError(f"query() expects a mapping or dataclass instance, got {type(value).__name__}")

    for key, item in value.items():
        if item is None:
            continue
        if isinstance(item, (list, tuple)):
            yield from ((key, entry) for entry in item if entry is not None)
        else:
            yield key, item
