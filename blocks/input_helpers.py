"""
Input normalization utilities for fxsim blocks.

This module provides helper functions for safely extracting raw fixed-point
values from the inputs dict passed to block execute() methods.

Usage:
    from blocks.input_helpers import get_raw, get_flag, InitStateManager

    def execute(self, time, inputs, params, **kwargs):
        init_mgr = InitStateManager(params)
        if init_mgr.needs_init():
            params['_acc_'] = 0
            init_mgr.mark_initialized()

        x = get_raw(inputs, 0)
        # ... rest of execute
"""

import numpy as np
from typing import Optional, Dict, Any, Tuple


def get_raw(
    inputs: Dict[int, Any],
    port: int,
    default: int = 0
) -> int:
    """
    Extract a raw fixed-point integer from inputs.

    Handles None, Python/numpy integers, and single-element arrays.

    Args:
        inputs: Input dictionary from execute()
        port: Port index to read from
        default: Default value if port is missing or None

    Returns:
        Python int
    """
    value = inputs.get(port)

    if value is None:
        return int(default)

    if isinstance(value, (int, np.integer)):
        return int(value)

    # Handle array-like
    arr = np.atleast_1d(value)
    if arr.size == 0:
        return int(default)
    return int(arr.flat[0])


def get_flag(
    inputs: Dict[int, Any],
    port: int,
    default: bool = False
) -> bool:
    """Extract a one-bit control signal (start, reset, is_sub)."""
    value = inputs.get(port)
    if value is None:
        return bool(default)
    return bool(np.atleast_1d(value).flat[0])


def get_quad(
    inputs: Dict[int, Any],
    port: int,
    default: Optional[Tuple[int, int, int, int]] = None
) -> Optional[Tuple[int, int, int, int]]:
    """
    Extract a four-element parameter bus.

    Returns:
        Tuple of four Python ints, or default when the port is unconnected

    Raises:
        ValueError: If the bus does not carry exactly four values
    """
    value = inputs.get(port)

    if value is None:
        return default

    arr = np.atleast_1d(np.asarray(value)).flatten()
    if arr.size != 4:
        raise ValueError(f"Port {port} expects 4 values, got {arr.size}")
    return tuple(int(v) for v in arr)


class InitStateManager:
    """
    Helper class for managing block initialization state.

    Simplifies the common pattern of checking and clearing the _init_start_ flag.
    """

    def __init__(
        self,
        params: Dict[str, Any],
        flag_name: str = "_init_start_"
    ):
        """
        Initialize the state manager.

        Args:
            params: Block parameters dict
            flag_name: Name of the init flag parameter
        """
        self._params = params
        self._flag_name = flag_name

    def needs_init(self) -> bool:
        """
        Check if initialization is needed.

        Returns:
            True if the init flag is True (or missing)
        """
        return self._params.get(self._flag_name, True)

    def mark_initialized(self) -> None:
        """
        Mark initialization as complete.

        Sets the init flag to False.
        """
        self._params[self._flag_name] = False

    def reset(self) -> None:
        """
        Reset to uninitialized state.

        Sets the init flag to True.
        """
        self._params[self._flag_name] = True
