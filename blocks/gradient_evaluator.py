"""
GradientEvaluator Block

Clocked wrapper around QuadraticEvaluator: one execute() is one tick.
"""

import logging
from blocks.base_block import BaseBlock
from blocks.input_helpers import get_flag, get_quad, InitStateManager
from fxsim.engine.evaluator import N_LANES, QuadraticEvaluator
from fxsim.fixed_point import WIDE, from_float

logger = logging.getLogger(__name__)


class GradientEvaluatorBlock(BaseBlock):
    """
    Multi-cycle objective and gradient evaluator.

    The evaluator instance lives in params['_evaluator_'] and is rebuilt
    when the _init_start_ flag is set. Parameters are sampled on the tick
    start is first seen; done stays high while start is held.
    """

    @property
    def block_name(self):
        return "GradientEvaluator"

    @property
    def category(self):
        return "Descent"

    @property
    def stateful(self):
        return True

    @property
    def doc(self):
        return (
            "Evaluates z = (a-2)^2 + b^2 + (c+2)^2 + (2d)^2 - 5,"
            "\nits gradient and the learning-rate scaled deltas."
            "\n\nParameters:"
            "\n- learning_rates: One learning rate per parameter"
            "\n\nInputs: start, reset, params (4 x Q8.8)"
            "\nOutputs: objective, deltas, done, overflow"
        )

    @property
    def params(self):
        return {
            "learning_rates": {
                "type": "list",
                "default": [0.125, 0.25, 0.5, 1.0],
                "doc": "Learning rate per parameter"
            },
        }

    @property
    def inputs(self):
        return [
            {"name": "start", "type": "bool"},
            {"name": "reset", "type": "bool"},
            {"name": "params", "type": "vector"},
        ]

    @property
    def outputs(self):
        return [
            {"name": "objective", "type": "raw"},
            {"name": "deltas", "type": "vector"},
            {"name": "done", "type": "bool"},
            {"name": "overflow", "type": "bool"},
        ]

    @property
    def optional_inputs(self):
        return [1, 2]

    def execute(self, time, inputs, params, **kwargs):
        try:
            init_mgr = InitStateManager(params)
            if init_mgr.needs_init():
                rates = [from_float(lr, WIDE) for lr in params.get('learning_rates', [])]
                params['_evaluator_'] = QuadraticEvaluator(rates)
                init_mgr.mark_initialized()

            evaluator = params['_evaluator_']
            out = evaluator.step(get_flag(inputs, 0), reset=get_flag(inputs, 1),
                                 params=get_quad(inputs, 2))
            return {0: out.objective, 1: out.deltas, 2: out.done, 3: out.overflow, 'E': False}

        except Exception as e:
            logger.error(f"GradientEvaluator error: {e}")
            return {0: 0, 1: (0,) * N_LANES, 2: False, 3: False, 'E': True, 'error': str(e)}
