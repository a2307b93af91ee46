"""endpointkit -- a typed, asynchronous HTTP access layer.

The package turns immutable endpoint descriptors into HTTP requests, sends
them through :mod:`httpx`, classifies every failure into a closed set of
typed errors, decodes successful bodies into typed results with
:mod:`pydantic`, retries transient failures with backoff, and caches read
results with a time-to-live.

Typical usage::

    from endpointkit import ApiClient, ClientConfig, Endpoint, TTLCache

    config = ClientConfig(base_url="https://api.example.com")
    async with ApiClient(config, cache=TTLCache(ttl_seconds=60)) as client:
        user = await client.execute(Endpoint.get("/users/42"), User, cache_key="user:42")

Modules:
    endpoint: Endpoint descriptors and HTTP methods.
    exceptions: Classified error hierarchy with exit-code mapping.
    codec: JSON decode/encode pipeline with key-casing and date conventions.
    retry: Retry policy with linear or exponential backoff.
    cache: In-memory and disk-backed TTL caches.
    client: Request builder, error classifier, and the API client.
    models: Pydantic configuration models.
    config: XDG-aware profile and configuration management.
    output: stdout/stderr diagnostics with Rich support.
"""

__version__ = "0.3.0"

from endpointkit.cache import DiskTTLCache, TTLCache
from endpointkit.client import ApiClient
from endpointkit.endpoint import Endpoint, HTTPMethod
from endpointkit.exceptions import (
    ClassifiedError,
    DecodeFailureError,
    EndpointKitError,
    ErrorKind,
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
    ServerError,
    TransportFailureError,
    UnauthorizedError,
    ValidationFailedError,
)
from endpointkit.models import ClientConfig, DecodeConventions, RetryConfig
from endpointkit.retry import RetryDecision, RetryPolicy

__all__ = [
    "ApiClient",
    "ClassifiedError",
    "ClientConfig",
    "DecodeConventions",
    "DecodeFailureError",
    "DiskTTLCache",
    "Endpoint",
    "EndpointKitError",
    "ErrorKind",
    "ForbiddenError",
    "HTTPMethod",
    "InvalidRequestError",
    "NotFoundError",
    "RetryConfig",
    "RetryDecision",
    "RetryPolicy",
    "ServerError",
    "TTLCache",
    "TransportFailureError",
    "UnauthorizedError",
    "ValidationFailedError",
]
