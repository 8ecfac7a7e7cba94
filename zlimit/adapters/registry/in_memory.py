"""In-memory limiter registry.

Notes:
- Per-process only: state is lost on restart and not shared across workers.
- Thread-safe: one re-entrant lock guards each operation's read-modify-write,
  so an action may call back into the same registry on the same thread.
- Stale names are never evicted; call ``clear`` or ``reset``.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from zlimit.adapters.registry.base import (
    AbstractLimiterRegistry,
    Action,
    LimiterState,
    ThrottleOutcome,
)
from zlimit.core.validation import (
    validate_action,
    validate_interval,
    validate_max_calls,
    validate_name,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def wall_clock_ms() -> float:
    """Milliseconds since the UNIX epoch."""
    return time.time() * 1000.0


def monotonic_clock_ms() -> float:
    """Milliseconds from a monotonic clock with an arbitrary origin."""
    return time.monotonic() * 1000.0


class InMemoryLimiterRegistry(AbstractLimiterRegistry):
    """Registry holding throttle timestamps and call quotas per name.

    The two mappings are independent: throttling a name never touches its
    quota and vice versa. Only ``clear``/``reset`` affect both.
    """

    def __init__(
        self,
        *,
        clock: Clock = wall_clock_ms,
        log_decisions: bool = True,
    ) -> None:
        """Initialize an empty registry.

        Args:
            clock: Time source returning milliseconds.
            log_decisions: Emit a DEBUG record for every allow/suppress decision.

        Raises:
            ValueError: If clock is not callable.
        """
        if not callable(clock):
            raise ValueError("clock must be callable")

        self._clock = clock
        self._log_decisions = log_decisions
        self._lock = threading.RLock()
        self._last_invoked_ms: dict[str, float] = {}
        self._remaining_calls: dict[str, int] = {}

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemoryLimiterRegistry(throttled={len(self._last_invoked_ms)}, "
            f"limited={len(self._remaining_calls)})"
        )

    def _log(self, event: str, name: str, **extra: object) -> None:
        if self._log_decisions:
            logger.debug(event, extra={"limiter_name": name, **extra})

    def throttle(self, name: str, action: Action, interval_ms: float) -> ThrottleOutcome:
        """Run ``action`` unless it ran for ``name`` less than ``interval_ms`` ago.

        The first call for a name always runs and is reported as FIRST_CALL so
        callers can tell it apart from a later call that was let through.

        Args:
            name: Limiter name.
            action: Zero-argument callable.
            interval_ms: Minimum time between permitted calls, in milliseconds.

        Returns:
            FIRST_CALL, ALLOWED or SUPPRESSED.

        Raises:
            InvalidArgumentError: If any argument is malformed.
        """
        validate_name(name)
        validate_action(action)
        interval = validate_interval(interval_ms)

        with self._lock:
            now = self._clock()
            last = self._last_invoked_ms.get(name)

            if last is None:
                # Recorded before running, so a failing first action still counts.
                self._last_invoked_ms[name] = now
                action()
                self._log("limiter.throttle.first_call", name, interval_ms=interval)
                return ThrottleOutcome.FIRST_CALL

            elapsed = now - last
            if elapsed >= interval:
                action()
                self._last_invoked_ms[name] = now
                self._log(
                    "limiter.throttle.allowed",
                    name,
                    interval_ms=interval,
                    elapsed_ms=elapsed,
                )
                return ThrottleOutcome.ALLOWED

            self._log(
                "limiter.throttle.suppressed",
                name,
                interval_ms=interval,
                elapsed_ms=elapsed,
            )
            return ThrottleOutcome.SUPPRESSED

    def limit(self, name: str, action: Action, max_calls: int) -> bool:
        """Run ``action`` while the quota for ``name`` is not exhausted.

        Only the first call for a name seeds its quota; ``max_calls`` passed
        afterwards is validated but ignored until the name is cleared.

        Args:
            name: Limiter name.
            action: Zero-argument callable.
            max_calls: Total number of permitted calls.

        Returns:
            True if the action ran, False otherwise.

        Raises:
            InvalidArgumentError: If any argument is malformed.
        """
        validate_name(name)
        validate_action(action)
        validate_max_calls(max_calls)

        with self._lock:
            remaining = self._remaining_calls.setdefault(name, max_calls)

            if remaining > 0:
                # Slot is taken before running so nested calls see it consumed.
                self._remaining_calls[name] = remaining - 1
                try:
                    action()
                except BaseException:
                    if name in self._remaining_calls:
                        self._remaining_calls[name] += 1
                    raise
                self._log(
                    "limiter.limit.allowed",
                    name,
                    remaining=self._remaining_calls.get(name),
                )
                return True

            self._log("limiter.limit.exhausted", name, max_calls=max_calls)
            return False

    def clear(self, name: str) -> bool:
        validate_name(name)

        with self._lock:
            had_timestamp = self._last_invoked_ms.pop(name, None) is not None
            had_quota = self._remaining_calls.pop(name, None) is not None

        cleared = had_timestamp or had_quota
        if cleared:
            logger.info(
                "limiter.cleared",
                extra={
                    "limiter_name": name,
                    "had_timestamp": had_timestamp,
                    "had_quota": had_quota,
                },
            )
        return cleared

    def state(self, name: str) -> LimiterState:
        validate_name(name)

        with self._lock:
            return LimiterState(
                name=name,
                last_invoked_ms=self._last_invoked_ms.get(name),
                remaining=self._remaining_calls.get(name),
            )

    def reset(self) -> int:
        """Forget every name. Returns how many distinct names held state."""

        with self._lock:
            count = len(self._last_invoked_ms.keys() | self._remaining_calls.keys())
            self._last_invoked_ms.clear()
            self._remaining_calls.clear()

        logger.info("limiter.reset", extra={"names_cleared": count})
        return count

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._last_invoked_ms.keys() | self._remaining_calls.keys())
