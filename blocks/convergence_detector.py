"""
ConvergenceDetector Block

Combinational check of the change in objective value between iterations.
"""

import logging
from blocks.base_block import BaseBlock
from blocks.input_helpers import get_raw
from fxsim.convergence import check_convergence
from fxsim.fixed_point import WIDE, from_float

logger = logging.getLogger(__name__)


class ConvergenceDetectorBlock(BaseBlock):
    """
    Outputs True when lower <= current - previous <= upper.

    Bounds are given as floats and quantized to Q24.8 on every call.
    """

    @property
    def block_name(self):
        return "ConvergenceDetector"

    @property
    def category(self):
        return "Descent"

    @property
    def doc(self):
        return (
            "Convergence window check."
            "\n\nParameters:"
            "\n- lower: Lower bound of the accepted change"
            "\n- upper: Upper bound of the accepted change"
            "\n\nInputs: current, previous (raw Q24.8)"
            "\nOutput: converged"
        )

    @property
    def params(self):
        return {
            "lower": {
                "type": "float",
                "default": -1.0 / 256,
                "doc": "Lower bound of the accepted change"
            },
            "upper": {
                "type": "float",
                "default": 1.0 / 256,
                "doc": "Upper bound of the accepted change"
            },
        }

    @property
    def inputs(self):
        return [
            {"name": "current", "type": "raw"},
            {"name": "previous", "type": "raw"},
        ]

    @property
    def outputs(self):
        return [{"name": "converged", "type": "bool"}]

    def execute(self, time, inputs, params, **kwargs):
        try:
            lower = from_float(params.get('lower', -1.0 / 256), WIDE)
            upper = from_float(params.get('upper', 1.0 / 256), WIDE)
            if lower > upper:
                raise ValueError("lower bound is above upper bound")

            converged = check_convergence(get_raw(inputs, 0), get_raw(inputs, 1), lower, upper)
            return {0: converged, 'E': False}

        except Exception as e:
            logger.error(f"ConvergenceDetector error: {e}")
            return {0: False, 'E': True, 'error': str(e)}
