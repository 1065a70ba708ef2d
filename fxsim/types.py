"""
Type definitions for fxsim.

This module provides common type aliases used throughout the codebase
for improved code readability and type checking.
"""

from typing import Callable, Tuple

Quad = Tuple[int, int, int, int]
"""Four values, one per parameter (a, b, c, d)."""

OverflowCallback = Callable[[int, str], None]
"""Diagnostic hook: (iteration, stage description) -> None."""
