"""
DescentController Block

Clocked wrapper around IterationController. Exposes the session boundary:
start/reset/initial parameters in, min value/optimal parameters/done out.
"""

import logging
from blocks.base_block import BaseBlock
from blocks.input_helpers import get_flag, get_quad, InitStateManager
from fxsim.engine.controller import IterationController
from fxsim.models.session import SessionConfig

logger = logging.getLogger(__name__)


class DescentControllerBlock(BaseBlock):
    """
    Fixed-point gradient descent controller.

    Stores the IterationController in params['_controller_']. Configuration
    errors surface as an 'E' output on the first tick.
    """

    @property
    def block_name(self):
        return "DescentController"

    @property
    def category(self):
        return "Descent"

    @property
    def stateful(self):
        return True

    @property
    def doc(self):
        return (
            "Gradient descent on the fixed quadratic objective."
            "\n\nParameters:"
            "\n- learning_rates: One learning rate per parameter"
            "\n- convergence_lower / convergence_upper: Accepted change window"
            "\n- max_iterations: Iteration cap"
            "\n- escalate_overflow: Log saturation as warnings"
            "\n\nInputs: start, reset, initial_params (4 x int8)"
            "\nOutputs: min_value, optimal_params, done, overflow"
        )

    @property
    def params(self):
        return {
            "learning_rates": {
                "type": "list",
                "default": [0.125, 0.25, 0.5, 1.0],
                "doc": "Learning rate per parameter"
            },
            "convergence_lower": {
                "type": "float",
                "default": -1.0 / 256,
                "doc": "Lower bound of the accepted change"
            },
            "convergence_upper": {
                "type": "float",
                "default": 1.0 / 256,
                "doc": "Upper bound of the accepted change"
            },
            "max_iterations": {
                "type": "int",
                "default": 50,
                "doc": "Iteration cap"
            },
            "escalate_overflow": {
                "type": "bool",
                "default": False,
                "doc": "Report saturation at WARNING level"
            },
        }

    @property
    def inputs(self):
        return [
            {"name": "start", "type": "bool"},
            {"name": "reset", "type": "bool"},
            {"name": "initial_params", "type": "vector"},
        ]

    @property
    def outputs(self):
        return [
            {"name": "min_value", "type": "raw"},
            {"name": "optimal_params", "type": "vector"},
            {"name": "done", "type": "bool"},
            {"name": "overflow", "type": "bool"},
        ]

    @property
    def optional_inputs(self):
        return [1, 2]

    def _build(self, params):
        config = SessionConfig.from_floats(
            learning_rates=params.get('learning_rates', [0.125, 0.25, 0.5, 1.0]),
            lower=params.get('convergence_lower', -1.0 / 256),
            upper=params.get('convergence_upper', 1.0 / 256),
            max_iterations=params.get('max_iterations', 50),
            escalate_overflow=params.get('escalate_overflow', False),
        )
        return IterationController(config)

    def execute(self, time, inputs, params, **kwargs):
        try:
            init_mgr = InitStateManager(params)
            if init_mgr.needs_init():
                params['_controller_'] = self._build(params)
                init_mgr.mark_initialized()

            controller = params['_controller_']
            out = controller.step(get_flag(inputs, 0), reset=get_flag(inputs, 1),
                                  initial_params=get_quad(inputs, 2))
            return {0: out.min_value, 1: out.optimal_params, 2: out.done,
                    3: out.overflow, 'E': False}

        except Exception as e:
            logger.error(f"DescentController error: {e}")
            return {0: 0, 1: (0, 0, 0, 0), 2: False, 3: False, 'E': True, 'error': str(e)}
