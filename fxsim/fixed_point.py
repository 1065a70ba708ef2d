"""
Fixed-point primitives for the gradient-descent datapath.

Python ints are unbounded, so register widths and saturation are emulated
explicitly. Values are carried as raw two's complement integers:

- narrow: Q8.8   (16 bit) parameters and parameter deltas
- wide:   Q24.8  (32 bit) objective value and learning rates
- double: Q48.16 (64 bit) unsaturated product of two wide values

Every producing primitive returns a FixedResult whose value is already
saturated into the target range. Nothing here raises on arithmetic.
"""

from dataclasses import dataclass
from typing import NamedTuple


FRAC_BITS = 8
SCALE = 1 << FRAC_BITS


@dataclass(frozen=True)
class FixedPointFormat:
    """Signed fixed-point format described by word length and fractional bits."""
    name: str
    wl: int
    frac: int

    @property
    def scale(self) -> int:
        return 1 << self.frac

    @property
    def min_raw(self) -> int:
        return -(1 << (self.wl - 1))

    @property
    def max_raw(self) -> int:
        return (1 << (self.wl - 1)) - 1

    def saturate(self, raw: int) -> "FixedResult":
        """Clamp a raw value into this format, flagging which bound was hit."""
        if raw > self.max_raw:
            return FixedResult(self.max_raw, True, False)
        if raw < self.min_raw:
            return FixedResult(self.min_raw, True, True)
        return FixedResult(raw, False, False)

    def contains(self, raw: int) -> bool:
        return self.min_raw <= raw <= self.max_raw


NARROW = FixedPointFormat("Q8.8", 16, FRAC_BITS)
WIDE = FixedPointFormat("Q24.8", 32, FRAC_BITS)
DOUBLE = FixedPointFormat("Q48.16", 64, 2 * FRAC_BITS)
INT8 = FixedPointFormat("int8", 8, 0)

WIDE_MAX = WIDE.max_raw
WIDE_MIN = WIDE.min_raw


class FixedResult(NamedTuple):
    """
    Saturated result of a fixed-point operation.

    overflow is the single saturation flag callers propagate and is set when
    either bound was hit. underflow is additionally set when the saturation
    happened at the negative bound.
    """
    value: int
    overflow: bool = False
    underflow: bool = False


# ---------------------------------------------------------------------------
# Boundary conversions
# ---------------------------------------------------------------------------

def from_float(value: float, fmt: FixedPointFormat = WIDE) -> int:
    """Quantize a float to raw fixed-point with round-to-nearest and saturation.

    Only used at configuration time; the datapath itself never sees floats.
    """
    raw = int(round(float(value) * fmt.scale))
    return fmt.saturate(raw).value


def to_float(raw: int, fmt: FixedPointFormat = WIDE) -> float:
    """Convert a raw fixed-point value to float (diagnostics and reporting)."""
    return raw / fmt.scale


def int8_to_narrow(value: int) -> int:
    """Convert a boundary int8 to narrow Q8.8. Raises ValueError outside int8."""
    value = int(value)
    if not INT8.contains(value):
        raise ValueError(f"Parameter {value} is outside the int8 range [-128, 127]")
    return value << FRAC_BITS


def narrow_to_wide(raw: int) -> int:
    """Sign-extend narrow to wide. Both formats share 8 fractional bits."""
    return NARROW.saturate(raw).value


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def add_sub(x: int, y: int, is_sub: bool = False) -> FixedResult:
    """Wide add (is_sub=False) or subtract (is_sub=True) with saturation."""
    raw = x - y if is_sub else x + y
    return WIDE.saturate(raw)


def multiply_double(x: int, y: int) -> int:
    """Exact Q48.16 product of two wide values. Never saturates."""
    return x * y


def clamp_double_to_wide(x: int) -> FixedResult:
    """Rescale a Q48.16 intermediate to Q24.8 and saturate into the wide range."""
    return WIDE.saturate(x >> FRAC_BITS)


def clamp_double_to_narrow(x: int) -> FixedResult:
    """Rescale a Q48.16 intermediate to Q8.8 and saturate into the narrow range."""
    return NARROW.saturate(x >> FRAC_BITS)


def multiply_wide(x: int, y: int) -> FixedResult:
    """Wide multiply through the double-wide path.

    overflow/underflow distinguish a positive from a negative saturation so
    the sign of a clipped product is never lost.
    """
    return clamp_double_to_wide(multiply_double(x, y))


def capped_diff(x: int, y: int) -> FixedResult:
    """Narrow x - y saturated at both narrow bounds (parameter update)."""
    return NARROW.saturate(x - y)


def round_to_integer(x: int) -> FixedResult:
    """Round a narrow value to the nearest int8, ties away from zero.

    overflow is set when the rounded value does not fit in int8, e.g. 127.5
    rounds to 128 and saturates to 127.
    """
    half = 1 << (FRAC_BITS - 1)
    magnitude = (abs(x) + half) >> FRAC_BITS
    rounded = -magnitude if x < 0 else magnitude
    return INT8.saturate(rounded)


def less_than(x: int, y: int) -> bool:
    """Wide signed compare used for minimum tracking."""
    return x < y
