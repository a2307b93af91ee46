"""Profile commands -- create, inspect and remove saved client configurations.

A profile is a named :class:`~endpointkit.models.ClientConfig` stored as
JSON in the profiles directory (see :func:`~endpointkit.config.get_profiles_dir`).
"""

from __future__ import annotations

from typing import Optional

import typer

from endpointkit.exceptions import EndpointKitError
from endpointkit.output import error, format_response, info, print_table, success

profile_app = typer.Typer(no_args_is_help=True)


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    base_url: str = typer.Option(..., "--base-url", help="Absolute http(s) base URL."),
    header: list[str] = typer.Option(
        [], "--header", "-H", help="Default header as Name:Value (repeatable)."
    ),
    max_attempts: int = typer.Option(3, "--max-attempts", help="Total attempts per call."),
    backoff: float = typer.Option(1.0, "--backoff", help="Base backoff in seconds."),
    exponential: bool = typer.Option(
        False, "--exponential", help="Use exponential instead of linear backoff."
    ),
    ttl: float = typer.Option(300, "--ttl", help="Cache TTL in seconds."),
    no_cache: bool = typer.Option(False, "--no-cache", help="Disable response caching."),
    camel_case: bool = typer.Option(
        False, "--camel-case", help="The API uses camelCase keys."
    ),
    auth_type: Optional[str] = typer.Option(
        None, "--auth", help="Auth type: bearer or api_key."
    ),
    auth_source: Optional[str] = typer.Option(
        None, "--auth-source", help="Credential source: env:VAR or file:/path."
    ),
    default: bool = typer.Option(False, "--default", help="Make this the default profile."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing profile."),
) -> None:
    """Create (or overwrite with ``--force``) a profile."""
    from pydantic import ValidationError

    from endpointkit.config import (
        load_global_config,
        profile_exists,
        save_global_config,
        save_profile,
    )
    from endpointkit.models import (
        AuthConfig,
        CacheConfig,
        ClientConfig,
        DecodeConventions,
        KeyCasing,
        Profile,
        RetryConfig,
    )

    if profile_exists(name) and not force:
        error(f"Profile '{name}' already exists. Use --force to overwrite.")
        raise typer.Exit(code=2)
    if (auth_type is None) != (auth_source is None):
        error("--auth and --auth-source must be given together.")
        raise typer.Exit(code=2)

    headers: dict[str, str] = {}
    for raw in header:
        key, sep, value = raw.partition(":")
        if not sep or not key.strip():
            error(f"Invalid header {raw!r}: expected Name:Value")
            raise typer.Exit(code=2)
        headers[key.strip()] = value.strip()

    try:
        client = ClientConfig(
            base_url=base_url,
            default_headers=headers,
            retry=RetryConfig(
                max_attempts=max_attempts,
                base_backoff=backoff,
                strategy="exponential" if exponential else "linear",
            ),
            cache=CacheConfig(enabled=not no_cache, ttl_seconds=ttl, backend="disk"),
            decode=DecodeConventions(
                key_casing=KeyCasing.CAMEL if camel_case else KeyCasing.SNAKE
            ),
            auth=AuthConfig(type=auth_type, source=auth_source) if auth_type else None,
        )
    except ValidationError as exc:
        error(f"Invalid profile settings: {exc}")
        raise typer.Exit(code=2)

    save_profile(Profile(name=name, client=client))
    if default:
        global_cfg = load_global_config()
        global_cfg.default_profile = name
        save_global_config(global_cfg)
    success(f"Profile '{name}' saved.")


@profile_app.command("list")
def profile_list() -> None:
    """List saved profiles, marking the default one."""
    from endpointkit.config import list_profiles, load_global_config, load_profile

    names = list_profiles()
    if not names:
        info("No profiles. Create one with: endpointkit profile add NAME --base-url URL")
        return
    default = load_global_config().default_profile
    rows = []
    for name in names:
        try:
            base_url = load_profile(name).client.base_url
        except EndpointKitError as exc:
            base_url = f"<invalid: {exc}>"
        rows.append([name, base_url, "*" if name == default else ""])
    print_table(["name", "base_url", "default"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Print a profile's full configuration."""
    from endpointkit.config import load_profile

    try:
        profile = load_profile(name)
    except EndpointKitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)
    format_response(profile.model_dump(mode="json"))


@profile_app.command("remove")
def profile_remove(name: str = typer.Argument(help="Profile name.")) -> None:
    """Delete a profile (and unset it as default)."""
    from endpointkit.config import delete_profile, load_global_config, save_global_config

    try:
        delete_profile(name)
    except EndpointKitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)
    global_cfg = load_global_config()
    if global_cfg.default_profile == name:
        global_cfg.default_profile = None
        save_global_config(global_cfg)
    success(f"Profile '{name}' removed.")
