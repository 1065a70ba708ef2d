"""
Function/gradient evaluator.

Evaluates z = (a-2)^2 + b^2 + (c+2)^2 + (2d)^2 - 5 together with the four
partial derivatives and the learning-rate scaled deltas. The work is split
over several clock ticks: one parameter lane per tick in each stage, so the
controller has to poll for completion instead of assuming a single step.

Any replacement evaluator subclasses BaseEvaluator and keeps the handshake:
outputs are registered, done stays high while start is held, and overflow
is asserted when any internal stage saturated.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from fxsim.fixed_point import (
    FRAC_BITS,
    add_sub,
    clamp_double_to_narrow,
    multiply_double,
    multiply_wide,
    narrow_to_wide,
)
from fxsim.types import Quad

logger = logging.getLogger(__name__)

N_LANES = 4

ONE = 1 << FRAC_BITS
FIVE = 5 << FRAC_BITS

# Per lane: (offset added to the parameter, term scale, gradient scale).
# term = scale * (p + offset) is squared; gradient = d(term^2)/dp.
QUADRATIC_LANES = (
    (-2 * ONE, 1, 2),   # (a-2)^2  -> 2(a-2)
    (0, 1, 2),          # b^2      -> 2b
    (2 * ONE, 1, 2),    # (c+2)^2  -> 2(c+2)
    (0, 2, 8),          # (2d)^2   -> 8d
)

# Latch tick + one tick per lane in TERMS, GRADIENTS and DELTAS.
EVALUATOR_LATENCY = 1 + 3 * N_LANES


class EvaluatorState(Enum):
    IDLE = "idle"
    TERMS = "terms"
    GRADIENTS = "gradients"
    DELTAS = "deltas"
    DONE = "done"


@dataclass(frozen=True)
class EvaluatorOutputs:
    """Registered outputs of one evaluator tick."""
    objective: int
    deltas: Quad
    gradients: Quad
    done: bool
    overflow: bool
    state: EvaluatorState


class BaseEvaluator(ABC):
    """
    Contract shared by every evaluator the controller can drive.

    Args:
        learning_rates: Four raw Q24.8 learning-rate constants.
    """

    def __init__(self, learning_rates: Sequence[int]):
        if len(learning_rates) != N_LANES:
            raise ValueError(f"Expected {N_LANES} learning rates, got {len(learning_rates)}")
        self.learning_rates: Quad = tuple(int(lr) for lr in learning_rates)

    @property
    def latency(self) -> int:
        """Ticks from the start-sampling tick to done, inclusive."""
        return EVALUATOR_LATENCY

    @abstractmethod
    def step(self, start: bool, reset: bool = False, params: Optional[Sequence[int]] = None) -> EvaluatorOutputs:
        """
        Advance one clock tick.

        :param start: Level start signal; params are sampled when it is first seen.
        :param reset: Forces IDLE and discards partial results.
        :param params: Four raw narrow parameter values.
        :return: Registered outputs after this tick.
        """

    @abstractmethod
    def reset(self) -> None:
        """Return to IDLE, discarding in-flight work."""

    def run_to_completion(self, params: Sequence[int]) -> EvaluatorOutputs:
        """Drive start high until done, then release the handshake."""
        limit = 4 * self.latency
        for _ in range(limit):
            outputs = self.step(True, params=params)
            if outputs.done:
                self.step(False, params=params)
                return outputs
        raise RuntimeError(f"{type(self).__name__} did not assert done within {limit} ticks")


class QuadraticEvaluator(BaseEvaluator):
    """
    Multi-cycle evaluator of the fixed quadratic objective.

    States: IDLE -> TERMS -> GRADIENTS -> DELTAS -> DONE.
    Squares go through multiply_wide, which uses the double-wide product
    before clamping, and deltas through multiply_double followed by a clamp
    into the narrow range.
    """

    def __init__(self, learning_rates: Sequence[int]):
        super().__init__(learning_rates)
        self.reset()

    def reset(self) -> None:
        self.state = EvaluatorState.IDLE
        self._lane = 0
        self._params = [0] * N_LANES
        self._shifted = [0] * N_LANES
        self._gradients = [0] * N_LANES
        self._deltas = [0] * N_LANES
        self._acc = 0
        self._objective = 0
        self._overflow = False

    def _flag(self, result, stage: str):
        if result.overflow:
            logger.debug(f"Saturation in {stage} lane {self._lane}: {result}")
            self._overflow = True
        return result.value

    def _latch(self, params: Sequence[int]) -> None:
        if params is None or len(params) != N_LANES:
            raise ValueError(f"Evaluator needs {N_LANES} parameters")
        self._params = [narrow_to_wide(int(p)) for p in params]
        self._acc = 0
        self._overflow = False
        self._lane = 0
        self.state = EvaluatorState.TERMS

    def _terms_lane(self) -> None:
        lane = self._lane
        offset, term_scale, _ = QUADRATIC_LANES[lane]
        shifted = self._flag(add_sub(self._params[lane], offset), "terms")
        self._shifted[lane] = shifted
        term = self._flag(multiply_wide(shifted, term_scale * ONE), "terms")
        square = self._flag(multiply_wide(term, term), "terms")
        self._acc = self._flag(add_sub(self._acc, square), "terms")
        if lane == N_LANES - 1:
            self._objective = self._flag(add_sub(self._acc, FIVE, is_sub=True), "terms")

    def _gradients_lane(self) -> None:
        lane = self._lane
        _, _, grad_scale = QUADRATIC_LANES[lane]
        self._gradients[lane] = self._flag(
            multiply_wide(self._shifted[lane], grad_scale * ONE), "gradients")

    def _deltas_lane(self) -> None:
        lane = self._lane
        product = multiply_double(self._gradients[lane], self.learning_rates[lane])
        self._deltas[lane] = self._flag(clamp_double_to_narrow(product), "deltas")

    def _advance(self, work, next_state: EvaluatorState) -> None:
        work()
        self._lane += 1
        if self._lane == N_LANES:
            self._lane = 0
            self.state = next_state

    def step(self, start: bool, reset: bool = False, params: Optional[Sequence[int]] = None) -> EvaluatorOutputs:
        if reset:
            self.reset()
            return self.outputs()

        if self.state == EvaluatorState.IDLE:
            if start:
                self._latch(params)
        elif self.state == EvaluatorState.TERMS:
            self._advance(self._terms_lane, EvaluatorState.GRADIENTS)
        elif self.state == EvaluatorState.GRADIENTS:
            self._advance(self._gradients_lane, EvaluatorState.DELTAS)
        elif self.state == EvaluatorState.DELTAS:
            self._advance(self._deltas_lane, EvaluatorState.DONE)
        elif self.state == EvaluatorState.DONE:
            if not start:
                self.state = EvaluatorState.IDLE

        return self.outputs()

    def outputs(self) -> EvaluatorOutputs:
        return EvaluatorOutputs(
            objective=self._objective,
            deltas=tuple(self._deltas),
            gradients=tuple(self._gradients),
            done=self.state == EvaluatorState.DONE,
            overflow=self._overflow,
            state=self.state,
        )


def evaluate(params: Sequence[int], learning_rates: Sequence[int]) -> EvaluatorOutputs:
    """One full evaluation on a fresh QuadraticEvaluator."""
    return QuadraticEvaluator(learning_rates).run_to_completion(params)
