"""
Convergence detection on successive objective values.

The window is an acceptance interval around zero change, not an absolute
threshold, so a run that overshoots and undershoots symmetrically still
converges once the net change per step is small.
"""

from dataclasses import dataclass
from typing import List, Tuple

from fxsim.fixed_point import WIDE, add_sub, from_float


@dataclass(frozen=True)
class ConvergenceWindow:
    """Raw Q24.8 bounds of the accepted change in objective value."""
    lower: int
    upper: int

    @classmethod
    def from_floats(cls, lower: float, upper: float) -> "ConvergenceWindow":
        return cls(from_float(lower, WIDE), from_float(upper, WIDE))

    @classmethod
    def symmetric(cls, width: int) -> "ConvergenceWindow":
        """Window [-width, +width] in raw units."""
        return cls(-abs(width), abs(width))

    def validate(self) -> Tuple[bool, List[str]]:
        errors = []
        if not WIDE.contains(self.lower) or not WIDE.contains(self.upper):
            errors.append("Convergence bounds must fit the wide Q24.8 range")
        if self.lower > self.upper:
            errors.append(
                f"Convergence lower bound {self.lower} is above upper bound {self.upper}"
            )
        return len(errors) == 0, errors

    def contains(self, delta: int) -> bool:
        return self.lower <= delta <= self.upper


def objective_delta(current: int, previous: int) -> int:
    """Saturated current - previous."""
    return add_sub(current, previous, is_sub=True).value


def check_convergence(current: int, previous: int, lower_bound: int, upper_bound: int) -> bool:
    """True when lower_bound <= current - previous <= upper_bound."""
    delta = objective_delta(current, previous)
    return lower_bound <= delta <= upper_bound
