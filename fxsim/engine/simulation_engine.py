"""
SimulationEngine - Clock driver for fxsim.
Holds the start/reset signal schedule, ticks the controller and records
what it produced on every step.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from fxsim.engine.controller import ControllerOutputs, ControllerState, IterationController
from fxsim.fixed_point import to_float
from fxsim.types import Quad

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionResult:
    """Final outputs of a session as read back by a host."""
    min_value: int
    optimal_params: Quad
    iterations: int
    converged: bool
    done: bool
    overflow: bool
    ticks: int

    @property
    def min_value_float(self) -> float:
        return to_float(self.min_value)


class SimulationEngine:
    """
    Simulation engine that owns the step clock of one controller.

    Attributes:
        controller: IterationController being clocked
        execution_initialized: Whether a session has been started
        execution_stop: Whether the last run stopped early on max_ticks
        error_msg: Last error message from a run
        max_ticks: Default safety bound for run()
        tick_count: Ticks elapsed since the engine was created or reset
        timeline: Tick index of each step of the latest run
        outs: Controller outputs of each step of the latest run
    """

    def __init__(self, controller: IterationController, max_ticks: Optional[int] = None) -> None:
        """
        Initialize simulation engine.

        Args:
            controller: IterationController to drive
            max_ticks: Default tick bound, defaults to the controller's budget
        """
        self.controller = controller
        self.max_ticks: Optional[int] = max_ticks

        # Execution state
        self.execution_initialized: bool = False
        self.execution_stop: bool = False
        self.error_msg: str = ""

        # Execution tracking
        self.tick_count: int = 0
        self.timeline: List[int] = []
        self.outs: List[ControllerOutputs] = []

    def tick(self, start: bool, reset: bool = False,
             initial_params: Optional[Sequence[int]] = None) -> ControllerOutputs:
        """Advance the clock by one step and record the outputs."""
        out = self.controller.step(start, reset=reset, initial_params=initial_params)
        self.tick_count += 1
        self.timeline.append(self.tick_count)
        self.outs.append(out)
        return out

    def reset(self) -> None:
        """Assert reset for one tick and drop the recorded trace."""
        self.reset_execution_data()
        self.tick(False, reset=True)

    def reset_execution_data(self) -> None:
        self.execution_initialized = False
        self.execution_stop = False
        self.error_msg = ""
        self.tick_count = 0
        self.timeline = []
        self.outs = []

    def run(self, initial_params: Sequence[int], max_ticks: Optional[int] = None) -> SessionResult:
        """
        Run one session: hold start high until done, then release it.

        Args:
            initial_params: Four int8 starting values
            max_ticks: Stop after this many ticks even if not done

        Returns:
            SessionResult read from the controller boundary
        """
        limit = max_ticks or self.max_ticks or self.controller.tick_budget + 1
        # Trace covers the latest session only
        self.timeline = []
        self.outs = []
        if self.controller.state != ControllerState.IDLE:
            self.tick(False, reset=True)
        first_tick = self.tick_count
        self.execution_initialized = True
        self.execution_stop = False
        self.error_msg = ""

        out = self.tick(True, initial_params=initial_params)
        while not out.done and self.tick_count - first_tick < limit:
            out = self.tick(True)

        if not out.done:
            self.execution_stop = True
            self.error_msg = f"Session not done after {limit} ticks"
            logger.warning(self.error_msg)
        else:
            # Deassert start so the controller leaves DONE with results latched
            out = self.tick(False)

        return SessionResult(
            min_value=out.min_value,
            optimal_params=out.optimal_params,
            iterations=out.iteration,
            converged=out.converged,
            done=out.done,
            overflow=out.overflow,
            ticks=self.tick_count - first_tick,
        )

    def objective_trace(self) -> np.ndarray:
        """Objective value of every completed iteration, as floats."""
        history = self.controller.session.history
        return np.array([to_float(r.objective) for r in history], dtype=np.float64)

    def best_trace(self) -> np.ndarray:
        """Best-known objective after every completed iteration, as floats."""
        history = self.controller.session.history
        return np.array([to_float(r.best_value) for r in history], dtype=np.float64)

    def get_execution_status(self):
        """
        Get current execution status.

        Returns:
            dict: Status information
        """
        return {
            'initialized': self.execution_initialized,
            'stopped': self.execution_stop,
            'error': self.error_msg if self.error_msg else None,
            'state': self.controller.state.value,
            'ticks': self.tick_count,
            'iteration': self.controller.session.iteration,
        }
