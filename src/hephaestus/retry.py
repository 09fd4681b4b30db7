"""Minimal blocking retry with a fixed delay.

Design goals:
- Small API surface: a policy value object and a retrier factory
- Explicit state (policy + attempt counter)
- Delay only between attempts, never after the last one
- Injectable ``sleep`` so tests never wait on a wall clock
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import TYPE_CHECKING, TypeVar

from hephaestus.errors import RetriesExhaustedError

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry policy with a constant delay between attempts."""

    max_attempts: int = 3
    delay_s: float = 1.0

    def __post_init__(self) -> None:
        """Validate invariants to keep retry behavior predictable."""
        if isinstance(self.max_attempts, bool) or not isinstance(
            self.max_attempts, int
        ):
            raise ValueError("RetryPolicy.max_attempts must be an integer")
        if self.max_attempts < 1:
            raise ValueError("RetryPolicy.max_attempts must be >= 1")
        if self.delay_s < 0:
            raise ValueError("RetryPolicy.delay_s must be >= 0")

    @property
    def worst_case_delay_s(self) -> float:
        """Total time spent sleeping when every attempt fails."""
        return (self.max_attempts - 1) * self.delay_s


def make_retrier(
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], object] = time.sleep,
) -> Callable[[Callable[[], T]], T]:
    """Return a reusable invoker that runs operations under *policy*.

    The invoker calls a zero-argument operation until it succeeds or
    ``policy.max_attempts`` calls have failed, in which case it raises
    :class:`RetriesExhaustedError` chained to the last error. Only
    ``Exception`` subclasses are retried; ``KeyboardInterrupt`` and friends
    propagate immediately.
    """

    def run(operation: Callable[[], T]) -> T:
        errors: list[Exception] = []
        attempts = 0
        while True:
            try:
                return operation()
            except Exception as exc:
                attempts += 1
                errors.append(exc)
                if attempts >= policy.max_attempts:
                    logger.warning(
                        "All %d attempts failed; last error: %r",
                        policy.max_attempts,
                        exc,
                    )
                    raise RetriesExhaustedError(policy.max_attempts, errors) from exc
                logger.debug(
                    "Attempt %d/%d failed (%r); retrying in %.3fs",
                    attempts,
                    policy.max_attempts,
                    exc,
                    policy.delay_s,
                )
            if policy.delay_s > 0:
                sleep(policy.delay_s)

    return run


def retry_call(
    operation: Callable[[], T],
    *,
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], object] = time.sleep,
) -> T:
    """Run *operation* once under a fresh retrier."""
    return make_retrier(policy or RetryPolicy(), sleep=sleep)(operation)
