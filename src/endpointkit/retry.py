"""Retry policy -- decides whether a failed attempt is worth repeating.

The policy is a pure function of the attempt index, the classified error,
and the attempt budget.  It never sleeps itself; the
:class:`~endpointkit.client.async_client.ApiClient` awaits the returned delay.

Two backoff strategies are available:

* ``linear`` (default) -- ``base * (attempt + 1)``: 1 s, 2 s, 3 s, ...
* ``exponential`` -- ``base * 2**attempt``, optionally stretched by up to
  ``jitter`` (a fraction below 1) so concurrent clients spread out.  With
  ``jitter < 1`` the delay still strictly increases with the attempt index.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable

from endpointkit.exceptions import ClassifiedError
from endpointkit.models import RetryConfig


@dataclass(frozen=True)
class RetryDecision:
    """Outcome of :meth:`RetryPolicy.should_retry`."""

    retry: bool
    delay: float = 0.0

    @classmethod
    def stop(cls) -> RetryDecision:
        return cls(retry=False)


class RetryPolicy:
    """Backoff calculator bounded by an attempt budget.

    Args:
        base_backoff: Base delay in seconds.
        strategy: ``"linear"`` or ``"exponential"``.
        jitter: Extra random fraction in ``[0, 1)`` applied to exponential delays.
        rng: Source of uniform randoms in ``[0, 1)``; injectable for tests.
    """

    def __init__(
        self,
        base_backoff: float = 1.0,
        strategy: str = "linear",
        jitter: float = 0.0,
        rng: Callable[[], float] = random.random,
    ) -> None:
        if strategy not in ("linear", "exponential"):
            raise ValueError(f"Unknown backoff strategy: {strategy!r}")
        if base_backoff <= 0:
            raise ValueError("base_backoff must be positive")
        if not 0 <= jitter < 1:
            raise ValueError("jitter must be in [0, 1)")
        self.base_backoff = base_backoff
        self.strategy = strategy
        self.jitter = jitter
        self._rng = rng

    @classmethod
    def from_config(cls, config: RetryConfig) -> RetryPolicy:
        return cls(
            base_backoff=config.base_backoff,
            strategy=config.strategy,
            jitter=config.jitter,
        )

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after the zero-based *attempt* failed."""
        if self.strategy == "linear":
            return self.base_backoff * (attempt + 1)
        delay = self.base_backoff * (2 ** attempt)
        if self.jitter:
            delay *= 1 + self.jitter * self._rng()
        return delay

    def should_retry(
        self, attempt: int, error: ClassifiedError, max_attempts: int
    ) -> RetryDecision:
        """Decide whether to try again after *attempt* failed with *error*.

        Args:
            attempt: Zero-based index of the attempt that just failed.
            error: The classified failure.
            max_attempts: Total attempts allowed, including the first.

        Returns:
            ``RetryDecision(retry=True, delay=...)`` or a stop decision.
            Non-retryable errors stop regardless of the remaining budget.
        """
        if attempt >= max_attempts - 1 or not error.retryable:
            return RetryDecision.stop()
        return RetryDecision(retry=True, delay=self.delay_for(attempt))
