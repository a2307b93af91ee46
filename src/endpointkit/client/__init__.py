"""HTTP client module for endpointkit.

Provides the request builder, the error classifier and :class:`ApiClient`,
which orchestrates them around an :class:`httpx.AsyncClient` with retry and
TTL caching.

Example::

    from endpointkit.client import ApiClient

    async with ApiClient(config) as client:
        users = await client.get("/users", list[User], cache_key="users:list")
"""

from endpointkit.client.async_client import ApiClient
from endpointkit.client.classifier import classify, classify_decode_failure
from endpointkit.client.request import build_request, build_url, merge_headers

__all__ = [
    "ApiClient",
    "build_request",
    "build_url",
    "classify",
    "classify_decode_failure",
    "merge_headers",
]
