"""Limiter registry adapters.

This package keeps the gating policies behind a small interface so callers
can depend on the abstraction while the in-memory registry holds the state.
"""
