"""
Session data for one optimization run.

SessionConfig is the configuration-time record (validated before a run);
OptimizationSession is the single-owner mutable state the controller
updates once per iteration and clears on start or reset.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from fxsim.convergence import ConvergenceWindow
from fxsim.fixed_point import INT8, WIDE, from_float, to_float
from fxsim.types import Quad

logger = logging.getLogger(__name__)

N_PARAMS = 4


@dataclass(frozen=True)
class SessionConfig:
    """
    Raw fixed-point configuration of a session.

    Attributes:
        learning_rates: Four Q24.8 learning-rate constants, one per parameter
        window: Accepted change in objective value between iterations
        max_iterations: Hard iteration cap
        escalate_overflow: Report saturation at WARNING instead of DEBUG
    """
    learning_rates: Quad
    window: ConvergenceWindow
    max_iterations: int = 50
    escalate_overflow: bool = False

    def validate(self) -> Tuple[bool, List[str]]:
        """Validate configuration before a session starts."""
        errors = []

        if len(self.learning_rates) != N_PARAMS:
            errors.append(f"Expected {N_PARAMS} learning rates, got {len(self.learning_rates)}")
        for i, lr in enumerate(self.learning_rates):
            if not WIDE.contains(lr):
                errors.append(f"Learning rate {i} does not fit the wide Q24.8 range")

        _, window_errors = self.window.validate()
        errors.extend(window_errors)

        if int(self.max_iterations) < 1:
            errors.append("max_iterations must be at least 1")

        return len(errors) == 0, errors

    def check(self) -> "SessionConfig":
        """Raise ValueError listing every problem if the configuration is invalid."""
        ok, errors = self.validate()
        if not ok:
            for error in errors:
                logger.error(f"Invalid session configuration: {error}")
            raise ValueError("Invalid session configuration: " + "; ".join(errors))
        return self

    @classmethod
    def from_floats(cls, learning_rates: Sequence[float], lower: float, upper: float,
                    max_iterations: int = 50, escalate_overflow: bool = False) -> "SessionConfig":
        """Quantize float settings to Q24.8."""
        return cls(
            learning_rates=tuple(from_float(lr, WIDE) for lr in learning_rates),
            window=ConvergenceWindow.from_floats(lower, upper),
            max_iterations=int(max_iterations),
            escalate_overflow=bool(escalate_overflow),
        )

    @classmethod
    def from_config_manager(cls, config: Any) -> "SessionConfig":
        """Build a validated config from a ConfigManager's `session` section."""
        return cls.from_floats(
            learning_rates=config.get("session.learning_rates", [0.125, 0.25, 0.5, 1.0]),
            lower=config.get("session.convergence_lower", -1.0 / 256),
            upper=config.get("session.convergence_upper", 1.0 / 256),
            max_iterations=config.get("session.max_iterations", 50),
            escalate_overflow=config.get("diagnostics.escalate_overflow", False),
        ).check()


@dataclass(frozen=True)
class IterationRecord:
    """What one Compare/Update step saw and did."""
    iteration: int
    params: Quad
    objective: int
    deltas: Quad
    best_value: int
    improved: bool
    converged: bool
    overflow: bool

    @property
    def objective_float(self) -> float:
        return to_float(self.objective)


@dataclass
class OptimizationSession:
    """
    Mutable state of the running session.

    Fields hold their reset values until INIT loads best_value with the wide
    maximum. From then on best_value never increases and is always <= every
    objective recorded in history.
    """
    initial_params: Quad = (0, 0, 0, 0)
    params: List[int] = field(default_factory=lambda: [0] * N_PARAMS)
    best_value: int = 0
    best_params: Quad = (0, 0, 0, 0)
    iteration: int = 0
    converged: bool = False
    previous_value: Optional[int] = None
    overflow: bool = False
    history: List[IterationRecord] = field(default_factory=list)

    def clear(self) -> None:
        self.initial_params = (0, 0, 0, 0)
        self.params = [0] * N_PARAMS
        self.best_value = 0
        self.best_params = (0, 0, 0, 0)
        self.iteration = 0
        self.converged = False
        self.previous_value = None
        self.overflow = False
        self.history = []

    @property
    def best_value_float(self) -> float:
        return to_float(self.best_value)


def validate_initial_params(initial_params: Sequence[int]) -> Quad:
    """Check the boundary int8 quadruple. Raises ValueError if malformed."""
    if initial_params is None or len(initial_params) != N_PARAMS:
        raise ValueError(f"Expected {N_PARAMS} initial parameters")
    values = tuple(int(p) for p in initial_params)
    for p in values:
        if not INT8.contains(p):
            raise ValueError(f"Initial parameter {p} is outside the int8 range [-128, 127]")
    return values
