"""Cache commands -- inspect and clear a profile's on-disk response cache."""

from __future__ import annotations

import typer

from endpointkit.exceptions import EndpointKitError
from endpointkit.output import error, format_response, info, success

cache_app = typer.Typer(no_args_is_help=True)


def _open_cache(ctx: typer.Context):
    from endpointkit.commands.request import profile_cache
    from endpointkit.config import resolve_profile

    obj = ctx.obj or {}
    try:
        profile = resolve_profile(obj.get("profile"))
    except EndpointKitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)
    cache = profile_cache(profile)
    if cache is None:
        info(f"Caching is disabled for profile '{profile.name}'.")
        raise typer.Exit()
    return profile, cache


@cache_app.command("stats")
def cache_stats(ctx: typer.Context) -> None:
    """Show entry count, TTL and location of the active profile's cache."""
    profile, cache = _open_cache(ctx)
    try:
        format_response({"profile": profile.name, **cache.stats()})
    finally:
        cache.close()


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Remove every cached response for the active profile."""
    profile, cache = _open_cache(ctx)
    try:
        cache.clear()
    finally:
        cache.close()
    success(f"Cache cleared for profile '{profile.name}'.")
