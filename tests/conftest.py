"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It pins the environment before settings are imported so a developer's
.env.development never leaks into the suite.
"""

import os
from unittest.mock import Mock

import pytest

# CRITICAL: Set this before any imports that might load settings
os.environ["ZLIMIT_ENV"] = "testing"
os.environ.setdefault("ZLIMIT_LIMITER_CLOCK", "wall")

from zlimit.adapters.registry.in_memory import InMemoryLimiterRegistry  # noqa: E402
from zlimit.core.registry import reset_registry  # noqa: E402


@pytest.fixture
def clock() -> Mock:
    """Deterministic millisecond clock starting at t=0."""
    return Mock(return_value=0.0)


@pytest.fixture
def registry(clock: Mock) -> InMemoryLimiterRegistry:
    return InMemoryLimiterRegistry(clock=clock)


@pytest.fixture(autouse=True)
def _fresh_default_registry():
    reset_registry()
    yield
    reset_registry()
