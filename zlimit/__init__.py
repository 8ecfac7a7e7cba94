"""Throttle or limit calls to named functions.

Typical use in a loop::

    from zlimit import limit

    for i in range(10):
        limit("log", lambda: print(i), 5)  # prints 0..4
"""

from zlimit.adapters.registry.base import (
    AbstractLimiterRegistry,
    LimiterState,
    ThrottleOutcome,
)
from zlimit.adapters.registry.in_memory import InMemoryLimiterRegistry
from zlimit.core.errors import AppError, InvalidArgumentError, ValidationAppError
from zlimit.core.registry import (
    clear,
    get_registry,
    limit,
    names,
    once,
    reset,
    reset_registry,
    state,
    throttle,
)

__all__ = [
    "AbstractLimiterRegistry",
    "AppError",
    "InMemoryLimiterRegistry",
    "InvalidArgumentError",
    "LimiterState",
    "ThrottleOutcome",
    "ValidationAppError",
    "clear",
    "get_registry",
    "limit",
    "names",
    "once",
    "reset",
    "reset_registry",
    "state",
    "throttle",
]
