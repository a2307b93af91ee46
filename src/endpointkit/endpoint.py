"""Endpoint descriptors -- immutable descriptions of one logical HTTP call.

An :class:`Endpoint` names the relative path, method, header overrides,
ordered query pairs and optional body of a request.  It performs no I/O;
:func:`~endpointkit.client.request.build_request` turns it into an
:class:`httpx.Request` against a client's base address.

Example::

    Endpoint.get("/users", query=[("page", 2), ("sort", "name")])
    Endpoint.patch("/users/me", body=UpdateProfile(display_name="Ada"))
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Union

from endpointkit.exceptions import InvalidRequestError

QueryInput = Union[Mapping[str, Any], Iterable[tuple[str, Any]], None]


class HTTPMethod(str, enum.Enum):
    """HTTP methods supported by the access layer."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def allows_body(self) -> bool:
        return self in (HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH)


def _normalize_query(query: QueryInput) -> tuple[tuple[str, str], ...]:
    if query is None:
        return ()
    items = query.items() if isinstance(query, Mapping) else query
    pairs = []
    for item in items:
        key, value = _query_pair(item)
        pairs.append((str(key), _query_value(value)))
    return tuple(pairs)


def _query_pair(item: Any) -> tuple[Any, Any]:
    message = f"Invalid query item {item!r}: expected a (key, value) pair"
    if isinstance(item, (str, bytes)):
        raise InvalidRequestError(message)
    try:
        key, value = item
    except (TypeError, ValueError) as exc:
        raise InvalidRequestError(message) from exc
    return key, value


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


@dataclass(frozen=True)
class Endpoint:
    """Immutable description of one request.

    Attributes:
        path: Path relative to the client's base address.
        method: HTTP method; strings such as ``"post"`` are accepted.
        headers: Header overrides that win over ambient and default headers.
        query: Ordered ``(key, value)`` pairs; order is kept in the URL.
        body: Optional payload, only allowed for POST, PUT and PATCH.

    Raises:
        InvalidRequestError: If a body is given for GET or DELETE, or the
            method is unknown.
    """

    path: str
    method: HTTPMethod = HTTPMethod.GET
    headers: Mapping[str, str] = field(default_factory=dict)
    query: tuple[tuple[str, str], ...] = ()
    body: Any = None

    def __post_init__(self) -> None:
        try:
            method = HTTPMethod(str(getattr(self.method, "value", self.method)).upper())
        except ValueError as exc:
            raise InvalidRequestError(f"Unsupported HTTP method: {self.method!r}") from exc
        if self.body is not None and not method.allows_body:
            raise InvalidRequestError(f"{method.value} requests cannot carry a body")

        object.__setattr__(self, "method", method)
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "query", _normalize_query(self.query))

    # Hash on the immutable parts only; the body may be unhashable.
    def __hash__(self) -> int:
        return hash((self.path, self.method, tuple(self.headers.items()), self.query))

    @property
    def is_read(self) -> bool:
        """True for GET, the only method whose results may be cached."""
        return self.method is HTTPMethod.GET

    @classmethod
    def get(cls, path: str, **kwargs: Any) -> Endpoint:
        return cls(path, HTTPMethod.GET, **kwargs)

    @classmethod
    def post(cls, path: str, **kwargs: Any) -> Endpoint:
        return cls(path, HTTPMethod.POST, **kwargs)

    @classmethod
    def put(cls, path: str, **kwargs: Any) -> Endpoint:
        return cls(path, HTTPMethod.PUT, **kwargs)

    @classmethod
    def patch(cls, path: str, **kwargs: Any) -> Endpoint:
        return cls(path, HTTPMethod.PATCH, **kwargs)

    @classmethod
    def delete(cls, path: str, **kwargs: Any) -> Endpoint:
        return cls(path, HTTPMethod.DELETE, **kwargs)
