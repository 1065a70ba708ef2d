"""Tests for the SimulationEngine clock driver."""

import numpy as np
import pytest

from fxsim.engine.controller import ControllerState, IterationController
from fxsim.engine.simulation_engine import SimulationEngine


@pytest.mark.unit
class TestSimulationEngine:

    def test_initialization(self, engine):
        assert engine.execution_initialized is False
        assert engine.execution_stop is False
        assert engine.tick_count == 0
        assert engine.outs == []

    def test_run_reports_ticks(self, never_converging_config):
        controller = IterationController(never_converging_config(2))
        engine = SimulationEngine(controller)
        result = engine.run((0, 0, 0, 0))
        assert result.done
        assert result.iterations == 2
        # budget ticks to done plus the tick that releases start
        assert result.ticks == controller.tick_budget + 1
        assert controller.state == ControllerState.IDLE

    def test_max_ticks_stops_run(self, engine):
        result = engine.run((0, 0, 0, 0), max_ticks=10)
        assert not result.done
        assert engine.execution_stop
        assert "10 ticks" in engine.error_msg
        status = engine.get_execution_status()
        assert status['stopped'] is True
        assert status['state'] == 'evaluate'

    def test_run_after_timeout_resets_controller(self, engine):
        engine.run((0, 0, 0, 0), max_ticks=10)
        result = engine.run((2, 0, -2, 0))
        assert result.done
        assert result.min_value == -1280

    def test_traces(self, engine):
        engine.run((0, 0, 0, 0))
        objectives = engine.objective_trace()
        bests = engine.best_trace()
        assert isinstance(objectives, np.ndarray)
        assert objectives[0] == pytest.approx(3.0)
        assert len(objectives) == len(bests) == engine.controller.session.iteration
        assert np.all(np.diff(bests) <= 0)

    def test_reset_clears_trace(self, engine):
        engine.run((0, 0, 0, 0))
        engine.reset()
        assert engine.tick_count == 1
        assert engine.controller.state == ControllerState.IDLE
        assert engine.get_execution_status()['iteration'] == 0

    def test_trace_covers_latest_run_only(self, never_converging_config):
        controller = IterationController(never_converging_config(1))
        engine = SimulationEngine(controller)
        first = engine.run((0, 0, 0, 0))
        second = engine.run((0, 0, 0, 0))
        assert len(engine.outs) == len(engine.timeline) == second.ticks == first.ticks
        assert engine.timeline[0] == first.ticks + 1
