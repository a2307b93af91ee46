"""Canonical Pydantic models shared across all endpointkit modules.

This is the single source of truth for configuration and payload shapes.
The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`DecodeConventions`, :class:`RetryConfig`, :class:`RequestConfig`,
    :class:`CacheConfig`, :class:`AuthConfig`, :class:`ClientConfig`,
    :class:`Profile`, and :class:`GlobalConfig`.

**Payload models** -- shapes the client reads from error responses:
    :class:`FieldError` and :class:`ValidationErrorBody`.

:class:`ClientConfig` and everything nested in it are frozen: a client's
configuration is fixed for its lifetime.
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Annotated, Literal, Mapping, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)


# --- Payloads ---


class FieldError(BaseModel):
    """A single field-level validation message returned with HTTP 422."""

    field: str
    message: str


class ValidationErrorBody(BaseModel):
    """Envelope of a 422 response: ``{"errors": [{"field": ..., "message": ...}]}``."""

    errors: list[FieldError] = Field(default_factory=list)


# --- Decode conventions ---


class KeyCasing(str, enum.Enum):
    """How object keys are spelled on the wire.

    ``SNAKE`` leaves keys untouched.  ``CAMEL`` converts camelCase wire keys to
    snake_case when decoding and back to camelCase when encoding.
    """

    SNAKE = "snake"
    CAMEL = "camel"


class DateFormat(str, enum.Enum):
    """How datetimes are represented on the wire."""

    ISO8601 = "iso8601"
    EPOCH_SECONDS = "epoch_seconds"


class DecodeConventions(BaseModel):
    """Key-casing and date conventions applied uniformly to request and response bodies."""

    model_config = ConfigDict(frozen=True)

    key_casing: KeyCasing = Field(default=KeyCasing.SNAKE, description="Wire key casing")
    date_format: DateFormat = Field(
        default=DateFormat.ISO8601, description="Wire datetime representation"
    )


# --- Client settings ---


class RetryConfig(BaseModel):
    """Retry budget and backoff settings."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1, description="Total attempts, including the first")
    base_backoff: float = Field(default=1.0, gt=0, description="Base delay in seconds")
    strategy: Literal["linear", "exponential"] = Field(
        default="linear", description="Backoff growth: linear or exponential"
    )
    jitter: float = Field(
        default=0.0, ge=0, lt=1, description="Random extra fraction for exponential backoff"
    )


class RequestConfig(BaseModel):
    """Transport settings applied to every request issued by a client."""

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=30, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class CacheConfig(BaseModel):
    """TTL cache settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True, description="Enable read caching")
    ttl_seconds: float = Field(default=300, gt=0, description="Entry time-to-live in seconds")
    backend: Literal["memory", "disk"] = Field(
        default="memory", description="Cache storage: memory or disk"
    )


class AuthConfig(BaseModel):
    """Authentication settings for the ambient auth collaborator.

    Plugins may define their own fields beyond the ones declared here.
    Extra fields are preserved and accessible via ``model_extra``.

    Example::

        AuthConfig(type="bearer", source="env:API_TOKEN")
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str = Field(description="Auth type: bearer, api_key")
    source: str = Field(description="Credential source: env:VAR or file:/path")
    header: Optional[str] = Field(default=None, description="Header or query name for api_key")
    location: Literal["header", "query"] = Field(
        default="header", description="Where an api_key is sent"
    )


# Read-only after validation; dumps back to a plain dict.
HeaderMap = Annotated[
    Mapping[str, str],
    AfterValidator(lambda value: MappingProxyType(dict(value))),
    PlainSerializer(dict, return_type=dict[str, str]),
]


class ClientConfig(BaseModel):
    """Immutable configuration shared by every call issued through one client.

    Example::

        ClientConfig(
            base_url="https://api.example.com/v1",
            default_headers={"User-Agent": "my-app/1.0"},
            retry=RetryConfig(max_attempts=3, base_backoff=0.5),
        )
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(description="Absolute http(s) base address")
    default_headers: HeaderMap = Field(default_factory=dict, validate_default=True)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    decode: DecodeConventions = Field(default_factory=DecodeConventions)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    auth: Optional[AuthConfig] = None

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must be an absolute http(s) URL")
        return value


class Profile(BaseModel):
    """A named :class:`ClientConfig` persisted under the profiles directory."""

    name: str
    client: ClientConfig


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/endpointkit/config.json``."""

    default_profile: Optional[str] = Field(
        default=None, description="Profile used when none is given"
    )
    verbose: bool = Field(default=False, description="Show debug diagnostics by default")
