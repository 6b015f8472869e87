"""Backoff schedules for retrying transports.

A policy is configured once and cloned for every request; the clone owns
the mutable schedule (current interval, start time, retry count), so a
single configuration can serve any number of concurrent requests.

- ExponentialBackoff: randomized exponential growth with an elapsed-time budget
- ConstantBackoff: fixed delay
- StopBackoff: never retry
- MaxRetries: caps the number of intervals produced by another policy
"""

from __future__ import annotations

import copy
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from http_middleware_core.config import SettingResolver

STOP: Final = None
"""Returned by next_interval() once the retry budget is exhausted."""


@runtime_checkable
class BackoffPolicy(Protocol):
    """Protocol for retry schedules."""

    def clone(self) -> BackoffPolicy:
        """Return an independent copy with a fresh schedule."""
        ...

    def next_interval(self) -> float | None:
        """Return the next delay in seconds, or STOP when the budget is exhausted."""
        ...


@dataclass
class ExponentialBackoff:
    """Exponential backoff with randomization and an elapsed-time budget.

    Each interval is drawn uniformly from
    ``[current * (1 - randomization_factor), current * (1 + randomization_factor)]``,
    after which ``current`` grows by ``multiplier`` up to ``max_interval``.
    Once more than ``max_elapsed_time`` seconds have passed since the last
    reset, next_interval() returns STOP.

    With the defaults the un-randomized intervals run 0.5, 0.75, 1.125, ...
    seconds, capped at 60, for at most 15 minutes.

    Attributes:
        initial_interval: First delay in seconds (default: 0.5)
        randomization_factor: Jitter ratio in [0, 1] (default: 0.5)
        multiplier: Growth factor per interval (default: 1.5)
        max_interval: Cap on the un-randomized interval (default: 60.0)
        max_elapsed_time: Budget in seconds; 0 means unlimited (default: 900.0)
        clock: Monotonic time source (default: time.monotonic)
    """

    initial_interval: float = 0.5
    randomization_factor: float = 0.5
    multiplier: float = 1.5
    max_interval: float = 60.0
    max_elapsed_time: float = 900.0
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)
    _current_interval: float = field(init=False, repr=False, compare=False)
    _start_time: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.initial_interval < 0:
            raise ValueError(f"initial_interval must be >= 0, got {self.initial_interval}")
        if not 0 <= self.randomization_factor <= 1:
            raise ValueError(f"randomization_factor must be in [0, 1], got {self.randomization_factor}")
        if self.multiplier < 1:
            raise ValueError(f"multiplier must be >= 1, got {self.multiplier}")
        if self.max_interval < self.initial_interval:
            raise ValueError("max_interval must be >= initial_interval")
        if self.max_elapsed_time < 0:
            raise ValueError(f"max_elapsed_time must be >= 0, got {self.max_elapsed_time}")
        self.reset()

    @classmethod
    def from_env(cls, resolver: SettingResolver | None = None, prefix: str = "HTTP_RETRY_") -> ExponentialBackoff:
        """Build a policy from settings, falling back to the defaults.

        Reads ``{prefix}INITIAL_INTERVAL``, ``{prefix}RANDOMIZATION_FACTOR``,
        ``{prefix}MULTIPLIER``, ``{prefix}MAX_INTERVAL`` and
        ``{prefix}MAX_ELAPSED_TIME``.

        Raises:
            InvalidSettingError: If a setting is present but not a number.
        """
        from http_middleware_core.config import SettingResolver

        resolver = resolver or SettingResolver()
        defaults = cls()
        return cls(
            initial_interval=resolver.resolve_float(
                env_var_name=f"{prefix}INITIAL_INTERVAL", default=defaults.initial_interval
            ),
            randomization_factor=resolver.resolve_float(
                env_var_name=f"{prefix}RANDOMIZATION_FACTOR", default=defaults.randomization_factor
            ),
            multiplier=resolver.resolve_float(env_var_name=f"{prefix}MULTIPLIER", default=defaults.multiplier),
            max_interval=resolver.resolve_float(env_var_name=f"{prefix}MAX_INTERVAL", default=defaults.max_interval),
            max_elapsed_time=resolver.resolve_float(
                env_var_name=f"{prefix}MAX_ELAPSED_TIME", default=defaults.max_elapsed_time
            ),
        )

    def reset(self) -> None:
        """Restart the schedule and the elapsed-time clock."""
        self._current_interval = self.initial_interval
        self._start_time = self.clock()

    def elapsed(self) -> float:
        """Seconds since the last reset."""
        return self.clock() - self._start_time

    def clone(self) -> ExponentialBackoff:
        other = copy.copy(self)
        other.reset()
        return other

    def next_interval(self) -> float | None:
        if self.max_elapsed_time and self.elapsed() > self.max_elapsed_time:
            return STOP
        interval = self._randomize(self._current_interval)
        self._increment()
        return interval

    def _randomize(self, interval: float) -> float:
        if self.randomization_factor == 0:
            return interval
        delta = self.randomization_factor * interval
        return random.uniform(interval - delta, interval + delta)

    def _increment(self) -> None:
        # Compare before multiplying to avoid overflow on huge intervals
        if self._current_interval >= self.max_interval / self.multiplier:
            self._current_interval = self.max_interval
        else:
            self._current_interval *= self.multiplier


@dataclass
class ConstantBackoff:
    """Fixed delay between retries, without limit.

    Attributes:
        interval: Delay in seconds (default: 1.0)
    """

    interval: float = 1.0

    def clone(self) -> ConstantBackoff:
        return ConstantBackoff(self.interval)

    def next_interval(self) -> float | None:
        return self.interval


@dataclass
class StopBackoff:
    """Never retry."""

    def clone(self) -> StopBackoff:
        return StopBackoff()

    def next_interval(self) -> float | None:
        return STOP


@dataclass
class MaxRetries:
    """Stop another policy after ``max_retries`` intervals.

    ``max_retries=0`` allows no retries at all. The wrapped policy may
    still stop earlier on its own.
    """

    policy: BackoffPolicy
    max_retries: int
    _retries: int = field(default=0, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")

    def clone(self) -> MaxRetries:
        return MaxRetries(self.policy.clone(), self.max_retries)

    def next_interval(self) -> float | None:
        if self._retries >= self.max_retries:
            return STOP
        self._retries += 1
        return self.policy.next_interval()
