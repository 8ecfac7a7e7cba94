"""Limiter registry interfaces.

Callers should depend on this abstraction (not the concrete implementation)
so the storage of per-name state can change without touching call sites.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable

Action = Callable[[], object]


class ThrottleOutcome(str, Enum):
    """Result of a throttled call.

    FIRST_CALL and ALLOWED both ran the action and are truthy; SUPPRESSED
    did not and is falsy.
    """

    FIRST_CALL = "first_call"
    ALLOWED = "allowed"
    SUPPRESSED = "suppressed"

    @property
    def executed(self) -> bool:
        return self is not ThrottleOutcome.SUPPRESSED

    def __bool__(self) -> bool:
        return self.executed


@dataclass(frozen=True)
class LimiterState:
    """Snapshot of the state recorded for one name.

    Attributes:
        name: Limiter name.
        last_invoked_ms: Clock reading (ms) of the last permitted throttled
            call, or None when the name was never throttled.
        remaining: Remaining quota, or None when the name was never limited.
    """

    name: str
    last_invoked_ms: float | None
    remaining: int | None

    @property
    def is_empty(self) -> bool:
        return self.last_invoked_ms is None and self.remaining is None


class AbstractLimiterRegistry(ABC):
    """Interface for limiter registries."""

    def once(self, name: str, action: Action) -> bool:
        """Run ``action`` only the first time ``name`` is seen.

        Args:
            name: Limiter name.
            action: Zero-argument callable.

        Returns:
            True if the action ran, False otherwise.
        """
        return self.limit(name, action, 1)

    @abstractmethod
    def throttle(self, name: str, action: Action, interval_ms: float) -> ThrottleOutcome:
        """Run ``action`` at most once per ``interval_ms`` for ``name``."""
        raise NotImplementedError

    @abstractmethod
    def limit(self, name: str, action: Action, max_calls: int) -> bool:
        """Run ``action`` for the first ``max_calls`` calls of ``name``."""
        raise NotImplementedError

    @abstractmethod
    def clear(self, name: str) -> bool:
        """Forget all state recorded for ``name``.

        Returns:
            True if any state was removed.
        """
        raise NotImplementedError

    @abstractmethod
    def state(self, name: str) -> LimiterState:
        """Return a snapshot of the state recorded for ``name``."""
        raise NotImplementedError

    @abstractmethod
    def reset(self) -> int:
        """Forget all state. Returns the number of names that held state."""
        raise NotImplementedError

    @abstractmethod
    def names(self) -> list[str]:
        """Return the sorted names that currently hold state."""
        raise NotImplementedError
