"""Process-wide default limiter registry.

This module wires the in-memory registry to the package settings and exposes
module-level helpers for callers that do not need their own instance.

Design goals:
- No implicit global in the core: ``InMemoryLimiterRegistry`` owns its state
  and can be constructed freely (e.g. one per test).
- Convenience at the boundary: ``once``/``throttle``/``limit``/``clear``
  delegate to a lazily built shared instance.
"""

from __future__ import annotations

import logging

from zlimit.adapters.registry.base import (
    AbstractLimiterRegistry,
    Action,
    LimiterState,
    ThrottleOutcome,
)
from zlimit.adapters.registry.in_memory import (
    Clock,
    InMemoryLimiterRegistry,
    monotonic_clock_ms,
    wall_clock_ms,
)
from zlimit.core.config import settings

logger = logging.getLogger(__name__)

_CLOCKS: dict[str, Clock] = {
    "wall": wall_clock_ms,
    "monotonic": monotonic_clock_ms,
}

_registry: AbstractLimiterRegistry | None = None
_registry_config: tuple[str, bool] | None = None


def get_registry() -> AbstractLimiterRegistry:
    """Return the process-wide registry instance.

    The instance is cached in-module to preserve state across calls.
    If configuration changes (primarily in tests), the registry is rebuilt
    and previously recorded state is dropped.

    Returns:
        AbstractLimiterRegistry: Configured registry instance.
    """

    global _registry, _registry_config

    config = (
        settings.limiter.clock,
        settings.limiter.log_decisions,
    )

    if _registry is None or _registry_config != config:
        if _registry is not None:
            logger.info(
                "limiter.registry.rebuilt",
                extra={"clock": config[0], "log_decisions": config[1]},
            )
        _registry = InMemoryLimiterRegistry(
            clock=_CLOCKS[settings.limiter.clock],
            log_decisions=settings.limiter.log_decisions,
        )
        _registry_config = config

    return _registry


def reset_registry() -> None:
    """Drop the shared instance; the next call builds a fresh one."""

    global _registry, _registry_config
    _registry = None
    _registry_config = None


def once(name: str, action: Action) -> bool:
    """Run ``action`` only the first time ``name`` is seen by the default registry."""
    return get_registry().once(name, action)


def throttle(name: str, action: Action, interval_ms: float) -> ThrottleOutcome:
    """Throttle ``action`` under ``name`` on the default registry."""
    return get_registry().throttle(name, action, interval_ms)


def limit(name: str, action: Action, max_calls: int) -> bool:
    """Run ``action`` for the first ``max_calls`` calls of ``name`` on the default registry."""
    return get_registry().limit(name, action, max_calls)


def clear(name: str) -> bool:
    """Forget the default registry's state for ``name``."""
    return get_registry().clear(name)


def state(name: str) -> LimiterState:
    """Snapshot the default registry's state for ``name``."""
    return get_registry().state(name)


def reset() -> int:
    """Forget every name on the default registry."""
    return get_registry().reset()


def names() -> list[str]:
    """Return the names holding state on the default registry."""
    return get_registry().names()
