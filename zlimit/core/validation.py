"""Argument validation for registry operations.

Every check runs before a registry touches its state, so a rejected call
never leaves a partial mutation behind.
"""
from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Any

from zlimit.core.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def _reject(argument: str, message: str, value: Any, **extra: Any) -> InvalidArgumentError:
    logger.debug(
        "validation.rejected",
        extra={"argument": argument, "actual_type": type(value).__name__},
    )
    return InvalidArgumentError(
        code="invalid_argument",
        message=message,
        details={"argument": argument, "actual_type": type(value).__name__, **extra},
    )


def validate_name(name: Any) -> str:
    """Ensure a limiter name is a non-empty string.

    Args:
        name: Candidate limiter name.

    Returns:
        The name unchanged.

    Raises:
        InvalidArgumentError: If the name is not a string or is empty.
    """
    if not isinstance(name, str):
        raise _reject("name", "name must be a string", name)
    if not name:
        raise _reject("name", "name must be a non-empty string", name, actual_value=name)
    return name


def validate_action(action: Any) -> None:
    """Ensure the action can be invoked with no arguments."""
    if not callable(action):
        raise _reject("action", "action must be callable", action)


def validate_interval(interval_ms: Any) -> float:
    """Ensure a throttle interval is a non-negative number of milliseconds.

    Booleans are rejected even though they are ints. NaN is rejected because
    no elapsed time compares as greater or equal to it.

    Raises:
        InvalidArgumentError: If the interval is not a usable number.
    """
    if isinstance(interval_ms, bool) or not isinstance(interval_ms, Real):
        raise _reject("interval_ms", "interval_ms must be a number", interval_ms)
    if math.isnan(interval_ms):
        raise _reject("interval_ms", "interval_ms must not be NaN", interval_ms)
    if interval_ms < 0:
        raise _reject(
            "interval_ms",
            "interval_ms must be >= 0",
            interval_ms,
            actual_value=interval_ms,
            min_value=0,
        )
    return float(interval_ms)


def validate_max_calls(max_calls: Any) -> int:
    """Ensure a quota is a non-negative integer.

    Raises:
        InvalidArgumentError: If the quota is not an int or is negative.
    """
    if isinstance(max_calls, bool) or not isinstance(max_calls, int):
        raise _reject("max_calls", "max_calls must be an integer", max_calls)
    if max_calls < 0:
        raise _reject(
            "max_calls",
            "max_calls must be >= 0",
            max_calls,
            actual_value=max_calls,
            min_value=0,
        )
    return max_calls
