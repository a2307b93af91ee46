"""Request lifecycle hooks for observability collaborators.

This module provides:

* :class:`RequestContext` -- per-attempt request/response facts passed to
  :meth:`ClientHooks.on_request` and :meth:`ClientHooks.on_response`.
* :class:`FailureEvent` -- the structured record of a terminal failure
  (classified error kind, attempt count, request line) passed to
  :meth:`ClientHooks.on_failure`.
* :class:`ClientHooks` -- base class with no-op hooks; subclass and override
  what you need (analytics, logging, metrics).
* :class:`HookRunner` -- fans each event out to several hooks in
  registration order.

Cancelled calls produce no failure event.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from endpointkit.exceptions import ClassifiedError, ErrorKind
from endpointkit.output import get_output


@dataclass
class RequestContext:
    """Facts about one transport attempt.

    ``status_code`` and ``elapsed`` are filled in before
    :meth:`ClientHooks.on_response`; a transport failure never reaches that
    hook.
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    attempt: int = 0
    status_code: Optional[int] = None
    elapsed: Optional[float] = None


@dataclass(frozen=True)
class FailureEvent:
    """Terminal failure of one ``execute`` call.

    Attributes:
        kind: The classified error kind.
        attempts: Number of transport calls made (0 for build failures).
        method: HTTP method of the endpoint.
        url: Absolute request URL, or the endpoint path when the request
            could not be built.
        status_code: HTTP status, when one was received.
        error: The classified error raised to the caller.
    """

    kind: ErrorKind
    attempts: int
    method: str
    url: str
    status_code: Optional[int]
    error: ClassifiedError


class ClientHooks:
    """Base class for lifecycle observers.  Every hook is a no-op by default."""

    def on_request(self, ctx: RequestContext) -> None:
        """Called before each transport attempt."""

    def on_response(self, ctx: RequestContext) -> None:
        """Called after each attempt that produced an HTTP status."""

    def on_failure(self, event: FailureEvent) -> None:
        """Called once when a call fails terminally."""


class HookRunner:
    """Executes hooks across several observers in registration order."""

    def __init__(self, hooks: Iterable[ClientHooks] = ()) -> None:
        self._hooks = list(hooks)

    def __bool__(self) -> bool:
        return bool(self._hooks)

    def add(self, hooks: ClientHooks) -> None:
        self._hooks.append(hooks)

    def run_request(self, ctx: RequestContext) -> None:
        for hooks in self._hooks:
            hooks.on_request(ctx)

    def run_response(self, ctx: RequestContext) -> None:
        for hooks in self._hooks:
            hooks.on_response(ctx)

    def run_failure(self, event: FailureEvent) -> None:
        """Notify every observer of *event*.

        An observer that raises is reported as a warning and does not stop
        the others, nor replace the error the caller receives.
        """
        for hooks in self._hooks:
            try:
                hooks.on_failure(event)
            except Exception as exc:
                get_output().warning(
                    f"Failure hook {type(hooks).__name__} raised {type(exc).__name__}: {exc}"
                )
