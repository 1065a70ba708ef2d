"""Tests for the iteration controller state machine."""

import pytest

from fxsim.convergence import ConvergenceWindow
from fxsim.engine.controller import ControllerState, IterationController
from fxsim.engine.evaluator import BaseEvaluator, EvaluatorOutputs, EvaluatorState
from fxsim.fixed_point import WIDE_MAX
from fxsim.models.session import SessionConfig


class ScriptedEvaluator(BaseEvaluator):
    """Two-tick evaluator replaying a fixed list of (objective, deltas)."""

    def __init__(self, learning_rates, script):
        super().__init__(learning_rates)
        self.script = list(script)
        self.calls = 0
        self.reset()

    @property
    def latency(self):
        return 2

    def reset(self):
        self.state = EvaluatorState.IDLE
        self._out = (0, (0, 0, 0, 0))

    def step(self, start, reset=False, params=None):
        if reset:
            self.reset()
        elif self.state == EvaluatorState.IDLE and start:
            self.state = EvaluatorState.TERMS
        elif self.state == EvaluatorState.TERMS:
            self._out = self.script[min(self.calls, len(self.script) - 1)]
            self.calls += 1
            self.state = EvaluatorState.DONE
        elif self.state == EvaluatorState.DONE and not start:
            self.state = EvaluatorState.IDLE
        objective, deltas = self._out
        return EvaluatorOutputs(objective, tuple(deltas), (0, 0, 0, 0),
                                self.state == EvaluatorState.DONE, False, self.state)


def _run(controller, initial_params, limit=10000):
    """Hold start until done; return the list of outputs."""
    outs = [controller.step(True, initial_params=initial_params)]
    while not outs[-1].done and len(outs) < limit:
        outs.append(controller.step(True))
    return outs


@pytest.mark.unit
class TestControllerLifecycle:

    def test_idle_until_start(self, controller):
        for _ in range(3):
            out = controller.step(False)
            assert out.state == ControllerState.IDLE
            assert not out.done

    def test_state_sequence(self, controller):
        assert controller.step(True, initial_params=(0, 0, 0, 0)).state == ControllerState.INIT
        assert controller.step(True).state == ControllerState.EVALUATE
        assert controller.session.best_value == WIDE_MAX

    def test_done_at_exact_tick_budget(self, never_converging_config):
        for n in (1, 3):
            controller = IterationController(never_converging_config(n))
            outs = _run(controller, (0, 0, 0, 0))
            assert outs[-1].done
            assert len(outs) == controller.tick_budget == 2 + n * 14
            assert outs[-1].iteration == n
            assert not outs[-1].converged

    def test_done_held_then_idle_with_results_latched(self, controller):
        outs = _run(controller, (0, 0, 0, 0))
        final = outs[-1]
        for _ in range(3):
            out = controller.step(True)
            assert out.state == ControllerState.DONE
            assert out.done

        out = controller.step(False)
        assert out.state == ControllerState.IDLE
        assert out.done
        assert out.min_value == final.min_value
        assert out.optimal_params == final.optimal_params

    def test_restart_clears_done(self, controller):
        _run(controller, (0, 0, 0, 0))
        controller.step(False)
        out = controller.step(True, initial_params=(1, 1, 1, 1))
        assert out.state == ControllerState.INIT
        assert not out.done
        assert out.iteration == 0

    def test_reset_preempts(self, controller):
        controller.step(True, initial_params=(0, 0, 0, 0))
        for _ in range(20):
            controller.step(True)
        out = controller.step(True, reset=True)
        assert out.state == ControllerState.IDLE
        assert not out.done
        assert out.iteration == 0
        assert out.min_value == 0


@pytest.mark.unit
class TestMinimumTracking:

    def test_best_value_never_increases(self, never_converging_config):
        controller = IterationController(never_converging_config(30))
        _run(controller, (-20, 15, 9, -3))
        bests = [r.best_value for r in controller.session.history]
        assert all(later <= earlier for earlier, later in zip(bests, bests[1:]))
        assert bests[-1] == min(r.objective for r in controller.session.history)

    def test_strict_less_than_keeps_first_of_ties(self):
        config = SessionConfig(learning_rates=(32, 64, 128, 256),
                               window=ConvergenceWindow(10 ** 6, 10 ** 6), max_iterations=3)
        script = [(100, (256, 0, 0, 0)), (100, (256, 0, 0, 0)), (50, (256, 0, 0, 0))]
        controller = IterationController(
            config, evaluator_factory=lambda rates: ScriptedEvaluator(rates, script))
        outs = _run(controller, (0, 0, 0, 0))

        history = controller.session.history
        assert [r.improved for r in history] == [True, False, True]
        assert history[1].best_value == 100
        assert outs[-1].min_value == 50
        # third evaluation ran at a = 0 - 1 - 1
        assert outs[-1].optimal_params == (-2, 0, 0, 0)

    def test_tie_keeps_earlier_snapshot(self):
        config = SessionConfig(learning_rates=(32, 64, 128, 256),
                               window=ConvergenceWindow(10 ** 6, 10 ** 6), max_iterations=2)
        script = [(100, (256, 0, 0, 0)), (100, (256, 0, 0, 0))]
        controller = IterationController(
            config, evaluator_factory=lambda rates: ScriptedEvaluator(rates, script))
        outs = _run(controller, (5, 0, 0, 0))
        assert outs[-1].optimal_params == (5, 0, 0, 0)

    def test_custom_evaluator_latency_in_budget(self):
        config = SessionConfig(learning_rates=(32, 64, 128, 256),
                               window=ConvergenceWindow(10 ** 6, 10 ** 6), max_iterations=4)
        controller = IterationController(
            config, evaluator_factory=lambda rates: ScriptedEvaluator(rates, [(0, (0, 0, 0, 0))]))
        outs = _run(controller, (0, 0, 0, 0))
        assert len(outs) == controller.tick_budget == 2 + 4 * 3


@pytest.mark.unit
class TestConvergence:

    def test_first_iteration_never_converges(self):
        config = SessionConfig(learning_rates=(32, 64, 128, 256),
                               window=ConvergenceWindow(-10, 10), max_iterations=5)
        controller = IterationController(
            config, evaluator_factory=lambda rates: ScriptedEvaluator(rates, [(0, (0, 0, 0, 0))]))
        outs = _run(controller, (0, 0, 0, 0))
        # identical objectives: converged on the second comparison
        assert outs[-1].iteration == 2
        assert outs[-1].converged

    def test_converges_at_minimum(self, controller):
        outs = _run(controller, (2, 0, -2, 0))
        assert outs[-1].iteration == 2
        assert outs[-1].converged
        assert outs[-1].min_value == -1280
        assert outs[-1].optimal_params == (2, 0, -2, 0)


@pytest.mark.unit
class TestValidation:

    def test_invalid_initial_params(self, controller):
        with pytest.raises(ValueError):
            controller.step(True, initial_params=(0, 0, 0, 200))
        with pytest.raises(ValueError):
            controller.step(True, initial_params=(0, 0, 0))

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            IterationController(SessionConfig(learning_rates=(32, 64, 128, 256),
                                              window=ConvergenceWindow(1, -1)))
        with pytest.raises(ValueError):
            IterationController(SessionConfig(learning_rates=(32, 64, 128, 256),
                                              window=ConvergenceWindow(-1, 1), max_iterations=0))


@pytest.mark.unit
class TestOverflowDiagnostics:

    def test_callback_and_sticky_flag(self, never_converging_config):
        seen = []
        controller = IterationController(never_converging_config(3),
                                         on_overflow=lambda it, stage: seen.append((it, stage)))
        outs = _run(controller, (0, 0, 0, -128))

        assert (0, "evaluator") in seen
        assert outs[-1].overflow
        assert controller.session.history[0].overflow
        # saturation never stops the session
        assert outs[-1].iteration == 3

    def test_escalated_overflow_logs_warning(self, caplog):
        config = SessionConfig(learning_rates=(32, 64, 128, 256),
                               window=ConvergenceWindow(10 ** 6, 10 ** 6),
                               max_iterations=1, escalate_overflow=True)
        controller = IterationController(config)
        with caplog.at_level("WARNING", logger="fxsim.engine.controller"):
            _run(controller, (0, 0, 0, -128))
        assert any("Saturation" in r.getMessage() for r in caplog.records)

    def test_no_overflow_on_clean_run(self, controller):
        outs = _run(controller, (0, 0, 0, 0))
        assert not outs[-1].overflow
