"""
IterationController - top-level state machine of the descent pipeline.

One call to step() is one clock tick. The controller owns exactly one
OptimizationSession and drives one evaluator; both are advanced in lockstep
on every tick. Reset preempts whatever state the controller is in.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from fxsim.convergence import check_convergence
from fxsim.engine.evaluator import BaseEvaluator, EvaluatorOutputs, QuadraticEvaluator
from fxsim.fixed_point import (
    WIDE_MAX,
    capped_diff,
    int8_to_narrow,
    less_than,
    round_to_integer,
    to_float,
)
from fxsim.models.session import (
    IterationRecord,
    OptimizationSession,
    SessionConfig,
    validate_initial_params,
)
from fxsim.types import OverflowCallback, Quad

logger = logging.getLogger(__name__)


class ControllerState(Enum):
    IDLE = "idle"
    INIT = "init"
    EVALUATE = "evaluate"
    COMPARE_UPDATE = "compare_update"
    DONE = "done"


@dataclass(frozen=True)
class ControllerOutputs:
    """
    Signals visible at the controller boundary after a tick.

    Attributes:
        state: Controller state after the tick
        done: Level completion flag, held until the next reset or start
        min_value: Best objective found (raw Q24.8)
        optimal_params: Rounded parameters of the best objective (int8)
        iteration: Completed iterations in the current session
        converged: Last convergence check result
        overflow: Diagnostic, sticky for the session
    """
    state: ControllerState
    done: bool
    min_value: int
    optimal_params: Quad
    iteration: int
    converged: bool
    overflow: bool

    @property
    def min_value_float(self) -> float:
        return to_float(self.min_value)


EvaluatorFactory = Callable[[Sequence[int]], BaseEvaluator]


class IterationController:
    """
    Sequences evaluation, minimum tracking, parameter update and termination.

    Args:
        config: Validated session configuration
        evaluator_factory: Builds the evaluator from the learning rates. Any
            BaseEvaluator honouring the done/overflow handshake can be used.
        on_overflow: Optional diagnostic hook called with (iteration, stage)
            whenever saturation is observed. Saturation never stops a session.
    """

    def __init__(self, config: SessionConfig,
                 evaluator_factory: EvaluatorFactory = QuadraticEvaluator,
                 on_overflow: Optional[OverflowCallback] = None) -> None:
        self.config = config.check()
        self.evaluator: BaseEvaluator = evaluator_factory(config.learning_rates)
        self.on_overflow = on_overflow

        self.session = OptimizationSession()
        self.state: ControllerState = ControllerState.IDLE
        self.done: bool = False
        self._pending: Optional[EvaluatorOutputs] = None

    @property
    def tick_budget(self) -> int:
        """Upper bound on ticks from the start-sampling tick to done."""
        return 2 + self.config.max_iterations * (self.evaluator.latency + 1)

    def reset(self) -> None:
        """Asynchronous reset: back to IDLE, session and evaluator discarded."""
        if self.state != ControllerState.IDLE:
            logger.debug(f"Reset in state {self.state.value}")
        self.state = ControllerState.IDLE
        self.done = False
        self._pending = None
        self.session.clear()
        self.evaluator.reset()

    def step(self, start: bool, reset: bool = False,
             initial_params: Optional[Sequence[int]] = None) -> ControllerOutputs:
        """
        Advance one clock tick.

        :param start: Level start signal.
        :param reset: Active reset, takes effect immediately.
        :param initial_params: Four int8 values, sampled when start is seen in IDLE.
        :return: Controller outputs after this tick.
        """
        if reset:
            self.reset()
            return self.outputs()

        evaluator_out = self.evaluator.step(
            self.state == ControllerState.EVALUATE, params=self.session.params)
        previous_state = self.state

        if self.state == ControllerState.IDLE:
            if start:
                self._begin_session(initial_params)
                self.state = ControllerState.INIT

        elif self.state == ControllerState.INIT:
            self.session.best_value = WIDE_MAX
            self.session.best_params = self.session.initial_params
            self.state = ControllerState.EVALUATE

        elif self.state == ControllerState.EVALUATE:
            if evaluator_out.done:
                self._pending = evaluator_out
                self.state = ControllerState.COMPARE_UPDATE

        elif self.state == ControllerState.COMPARE_UPDATE:
            self._compare_update(self._pending)
            self._pending = None
            if self.session.converged or self.session.iteration >= self.config.max_iterations:
                self._finish()
            else:
                self.state = ControllerState.EVALUATE

        elif self.state == ControllerState.DONE:
            if not start:
                self.state = ControllerState.IDLE

        if self.state != previous_state:
            logger.debug(f"Controller {previous_state.value} -> {self.state.value}")

        return self.outputs()

    def outputs(self) -> ControllerOutputs:
        return ControllerOutputs(
            state=self.state,
            done=self.done,
            min_value=self.session.best_value,
            optimal_params=self.session.best_params,
            iteration=self.session.iteration,
            converged=self.session.converged,
            overflow=self.session.overflow,
        )

    # ------------------------------------------------------------------
    # State actions
    # ------------------------------------------------------------------

    def _begin_session(self, initial_params: Optional[Sequence[int]]) -> None:
        initial = validate_initial_params(initial_params)
        self.session.clear()
        self.session.initial_params = initial
        self.session.params = [int8_to_narrow(p) for p in initial]
        self.done = False
        logger.info(f"Session start: params={initial}, "
                    f"max_iterations={self.config.max_iterations}")

    def _compare_update(self, result: EvaluatorOutputs) -> None:
        session = self.session
        window = self.config.window
        iteration = session.iteration

        if result.overflow:
            self._report_overflow(iteration, "evaluator")

        converged = False
        if session.previous_value is not None:
            converged = check_convergence(result.objective, session.previous_value,
                                          window.lower, window.upper)

        evaluated = tuple(session.params)
        improved = less_than(result.objective, session.best_value)
        if improved:
            session.best_value = result.objective
            snapshot = []
            for p in evaluated:
                rounded = round_to_integer(p)
                if rounded.overflow:
                    self._report_overflow(iteration, "round")
                snapshot.append(rounded.value)
            session.best_params = tuple(snapshot)

        updated = []
        for p, delta in zip(evaluated, result.deltas):
            diff = capped_diff(p, delta)
            if diff.overflow:
                self._report_overflow(iteration, "update")
            updated.append(diff.value)
        session.params = updated

        session.previous_value = result.objective
        session.iteration += 1
        session.converged = converged

        session.history.append(IterationRecord(
            iteration=iteration,
            params=evaluated,
            objective=result.objective,
            deltas=result.deltas,
            best_value=session.best_value,
            improved=improved,
            converged=converged,
            overflow=result.overflow,
        ))
        logger.debug(f"Iteration {iteration}: z={to_float(result.objective):.4f} "
                     f"best={to_float(session.best_value):.4f} converged={converged}")

    def _finish(self) -> None:
        self.state = ControllerState.DONE
        self.done = True
        reason = "converged" if self.session.converged else "iteration cap"
        logger.info(f"Session done ({reason}) after {self.session.iteration} iterations: "
                    f"min={to_float(self.session.best_value):.4f} "
                    f"params={self.session.best_params}")

    def _report_overflow(self, iteration: int, stage: str) -> None:
        self.session.overflow = True
        level = logging.WARNING if self.config.escalate_overflow else logging.DEBUG
        logger.log(level, f"Saturation in {stage} stage at iteration {iteration}")
        if self.on_overflow is not None:
            self.on_overflow(iteration, stage)
