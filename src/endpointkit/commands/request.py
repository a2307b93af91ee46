"""``endpointkit request`` -- send one request through the active profile.

The decoded JSON body is written to stdout; diagnostics (retries, cache
hits) go to stderr with ``--verbose``.  On failure the classified error's
user message is printed and the process exits with the error's exit code.

GET results go through the profile's cache (a per-profile disk store by
default) when a ``--cache-key`` is given and the profile enables caching.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer

from endpointkit.auth import create_default_manager
from endpointkit.cache import BaseCache, create_cache
from endpointkit.client import ApiClient
from endpointkit.config import get_cache_dir, resolve_profile
from endpointkit.endpoint import Endpoint
from endpointkit.exceptions import (
    ClassifiedError,
    EndpointKitError,
    ForbiddenError,
    InvalidRequestError,
    UnauthorizedError,
)
from endpointkit.models import Profile
from endpointkit.output import debug, error, format_response, suggest


def _parse_pairs(values: list[str], separator: str, what: str) -> list[tuple[str, str]]:
    pairs = []
    for raw in values:
        key, sep, value = raw.partition(separator)
        if not sep or not key.strip():
            raise InvalidRequestError(f"Invalid {what} {raw!r}: expected NAME{separator}VALUE")
        pairs.append((key.strip(), value.strip() if separator == ":" else value))
    return pairs


def _parse_body(data: Optional[str]) -> Any:
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise InvalidRequestError(f"--data is not valid JSON: {exc}") from exc


def profile_cache(profile: Profile) -> Optional[BaseCache]:
    """Cache for *profile*, or ``None`` when its caching is disabled.

    Disk stores live in a per-profile directory under the cache root.
    """
    return create_cache(profile.client.cache, get_cache_dir() / profile.name)


async def _send(profile: Profile, endpoint: Endpoint, cache_key: Optional[str]) -> Any:
    cache = profile_cache(profile)
    try:
        async with ApiClient(
            profile.client,
            cache=cache,
            auth_manager=create_default_manager(),
        ) as client:
            return await client.execute(endpoint, Any, cache_key=cache_key)
    finally:
        if cache is not None:
            cache.close()


def request_command(
    ctx: typer.Context,
    method: str = typer.Argument(help="HTTP method: GET, POST, PUT, PATCH or DELETE."),
    path: str = typer.Argument(help="Path relative to the profile's base URL."),
    query: list[str] = typer.Option(
        [], "--query", "-q", help="Query parameter as key=value (repeatable, order kept)."
    ),
    header: list[str] = typer.Option(
        [], "--header", "-H", help="Header as Name:Value (repeatable)."
    ),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON request body."),
    cache_key: Optional[str] = typer.Option(
        None, "--cache-key", help="Cache the GET result under this key."
    ),
) -> None:
    """Send a request and print the decoded response body.

    Example::

        endpointkit -p demo request GET /users -q page=2 -q sort=name
        endpointkit -p demo request PATCH /users/me -d '{"bio": "hi"}'
    """
    obj = ctx.obj or {}
    try:
        profile = resolve_profile(obj.get("profile"), obj.get("base_url"))
        endpoint = Endpoint(
            path,
            method,
            headers=dict(_parse_pairs(header, ":", "header")),
            query=_parse_pairs(query, "=", "query parameter"),
            body=_parse_body(data),
        )
        debug(f"Profile: {profile.name} ({profile.client.base_url})")
        result = asyncio.run(_send(profile, endpoint, cache_key))
    except ClassifiedError as exc:
        detail = exc.user_message
        if isinstance(exc, InvalidRequestError) and exc.status_code is None:
            detail = str(exc)
        error(f"{detail} ({exc.kind.value})")
        debug(str(exc))
        if isinstance(exc, (UnauthorizedError, ForbiddenError)):
            suggest("Check the auth source configured for this profile")
        raise typer.Exit(code=exc.exit_code)
    except EndpointKitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    if result is not None:
        format_response(result)
