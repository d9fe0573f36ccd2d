"""
Outcome of a reconcile attempt and the retry schedule for failed ones.
"""
import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import OperatorConfig

# 2**32 * base delay is far beyond any sane cap.
_MAX_EXPONENT = 32


@dataclass(frozen=True)
class Action:
    """What the dispatch loop should do after a reconcile attempt."""

    requeue_after: Optional[float] = None

    @classmethod
    def requeue(cls, seconds: float) -> "Action":
        return cls(requeue_after=seconds)

    @classmethod
    def await_change(cls) -> "Action":
        return cls()


@dataclass(frozen=True)
class ErrorPolicy:
    """
    Schedules the next attempt after a failed reconcile.

    Every error is retried and there is no attempt limit. With `backoff`
    enabled the delay doubles per consecutive failure, starting at
    `base_delay` and capped at `max_delay`, with +/- `jitter` spread so that
    many devnets failing together do not retry in lockstep. Without it every
    retry waits exactly `base_delay`.
    """

    base_delay: float = 10
    max_delay: float = 300
    backoff: bool = True
    jitter: float = 0.1

    @classmethod
    def from_config(cls, config: OperatorConfig) -> "ErrorPolicy":
        return cls(
            base_delay=config.retry_delay,
            max_delay=config.retry_max_delay,
            backoff=config.retry_backoff,
        )

    def delay_for(self, retry: int, rng: Callable[[], float] = random.random) -> float:
        """Delay before the attempt following `retry` earlier failures."""
        if not self.backoff:
            return self.base_delay
        delay = min(self.base_delay * 2 ** min(max(retry, 0), _MAX_EXPONENT), self.max_delay)
        if self.jitter:
            delay *= 1 + self.jitter * (2 * rng() - 1)
        return min(delay, self.max_delay)

    def on_error(self, error: BaseException, retry: int, logger: logging.Logger) -> Action:
        delay = self.delay_for(retry)
        logger.warning(f"Reconcile failed (attempt {retry + 1}), retrying in {delay:.1f}s: {error!r}")
        return Action.requeue(delay)
