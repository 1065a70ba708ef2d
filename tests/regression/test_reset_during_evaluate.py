"""
Regression test: reset asserted while the evaluator is mid-computation.

A reset must discard the in-flight evaluation and the partial session so the
next session produces exactly what a fresh controller would.
"""

import pytest

from fxsim.engine.controller import ControllerState, IterationController
from fxsim.engine.evaluator import EvaluatorState
from fxsim.engine.simulation_engine import SimulationEngine


@pytest.mark.regression
class TestResetDuringEvaluate:

    def test_next_session_matches_fresh_run(self, session_config):
        controller = IterationController(session_config)
        engine = SimulationEngine(controller)

        engine.tick(True, initial_params=(10, -5, 7, 0))
        for _ in range(20):
            engine.tick(True)
        assert controller.state == ControllerState.EVALUATE
        assert controller.evaluator.state != EvaluatorState.IDLE

        out = engine.tick(True, reset=True)
        assert out.state == ControllerState.IDLE
        assert controller.evaluator.state == EvaluatorState.IDLE
        assert out.iteration == 0
        assert not out.done

        result = engine.run((0, 0, 0, 0))
        fresh = SimulationEngine(IterationController(session_config)).run((0, 0, 0, 0))
        assert result == fresh

    def test_reset_while_done(self, engine):
        engine.run((0, 0, 0, 0))
        out = engine.tick(True, reset=True)
        assert not out.done
        assert out.min_value == 0
        assert out.optimal_params == (0, 0, 0, 0)
