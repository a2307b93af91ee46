"""Request builder -- turns an :class:`~endpointkit.endpoint.Endpoint` into an :class:`httpx.Request`.

The builder performs no I/O.  It is responsible for three things:

1. **URL** -- the client's base address joined with the endpoint path, then
   the query pairs appended in the order supplied.  The same endpoint always
   yields the same URL string.
2. **Headers** -- merged in increasing precedence: the ``Accept`` baseline,
   the configured default headers, ambient headers (from the auth
   collaborator), and finally the endpoint's own overrides.  Names compare
   case-insensitively.
3. **Body** -- encoded with :func:`~endpointkit.codec.encode_body` under the
   client's conventions.

Every failure here is the caller's and raises
:class:`~endpointkit.exceptions.InvalidRequestError`.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional
from urllib.parse import quote, urlencode

import httpx

from endpointkit.codec import encode_body
from endpointkit.endpoint import Endpoint
from endpointkit.exceptions import InvalidRequestError
from endpointkit.models import ClientConfig

_PATH_SAFE = "/:@-._~!$&'()*+,;=%"


def build_url(base_url: str, path: str, query: Iterable[tuple[str, str]] = ()) -> str:
    """Join *base_url* and *path* and append *query* pairs in order.

    Example::

        >>> build_url("https://api.example.com/v1/", "/users", [("page", "2"), ("q", "a b")])
        'https://api.example.com/v1/users?page=2&q=a%20b'
    """
    url = base_url.rstrip("/")
    if path.strip("/"):
        url = f"{url}/{quote(path.lstrip('/'), safe=_PATH_SAFE)}"
    pairs = list(query)
    if pairs:
        url = f"{url}?{urlencode(pairs, quote_via=quote)}"
    return url


def merge_headers(*layers: Optional[Mapping[str, str]]) -> dict[str, str]:
    """Merge header mappings; later layers win, names compare case-insensitively."""
    merged: dict[str, tuple[str, str]] = {}
    for layer in layers:
        for name, value in (layer or {}).items():
            merged[name.lower()] = (name, value)
    return dict(merged.values())


def build_request(
    config: ClientConfig,
    endpoint: Endpoint,
    ambient_headers: Optional[Mapping[str, str]] = None,
    ambient_params: Optional[Mapping[str, str]] = None,
) -> httpx.Request:
    """Compose the concrete request for *endpoint*.

    Args:
        config: Client configuration supplying the base URL, default
            headers and encoding conventions.
        endpoint: The endpoint descriptor.
        ambient_headers: Headers from the auth collaborator.
        ambient_params: Query parameters from the auth collaborator, appended
            after the endpoint's own pairs.

    Raises:
        InvalidRequestError: If the URL is invalid or the body cannot be encoded.
    """
    query = list(endpoint.query) + list((ambient_params or {}).items())
    url = build_url(config.base_url, endpoint.path, query)

    headers = merge_headers(
        {"Accept": "application/json"},
        config.default_headers,
        ambient_headers,
        endpoint.headers,
    )

    content: Optional[bytes] = None
    if endpoint.body is not None:
        try:
            content = encode_body(endpoint.body, config.decode)
        except (TypeError, ValueError) as exc:
            raise InvalidRequestError(f"Could not encode request body: {exc}") from exc
        headers = merge_headers({"Content-Type": "application/json"}, headers)

    try:
        request = httpx.Request(endpoint.method.value, url, headers=headers, content=content)
    except httpx.InvalidURL as exc:
        raise InvalidRequestError(f"Invalid URL {url!r}: {exc}") from exc
    if not request.url.host:
        raise InvalidRequestError(f"Invalid URL {url!r}: missing host")
    return request
