"""
Multiply Block

Q24.8 x Q24.8 multiplier with a selectable output width.
"""

import logging
from blocks.base_block import BaseBlock
from blocks.input_helpers import get_raw
from fxsim.fixed_point import multiply_double, multiply_wide

logger = logging.getLogger(__name__)


class MultiplyBlock(BaseBlock):
    """
    Multiplies two wide operands.

    mode 'wide' clamps the product back to Q24.8 and reports saturation.
    mode 'double' returns the full Q48.16 product, which cannot overflow.
    """

    @property
    def block_name(self):
        return "Multiply"

    @property
    def category(self):
        return "Fixed-Point Primitives"

    @property
    def doc(self):
        return (
            "Fixed-point multiply."
            "\n\nParameters:"
            "\n- mode: 'wide' (clamped Q24.8) or 'double' (Q48.16)"
            "\n\nInputs: x1, x2"
            "\nOutputs: y, overflow"
        )

    @property
    def params(self):
        return {
            "mode": {
                "type": "choice",
                "default": "wide",
                "options": ["wide", "double"],
                "doc": "Output width of the product"
            },
        }

    @property
    def inputs(self):
        return [
            {"name": "x1", "type": "raw"},
            {"name": "x2", "type": "raw"},
        ]

    @property
    def outputs(self):
        return [
            {"name": "y", "type": "raw"},
            {"name": "overflow", "type": "bool"},
        ]

    def execute(self, time, inputs, params, **kwargs):
        try:
            x = get_raw(inputs, 0)
            y = get_raw(inputs, 1)
            mode = params.get('mode', 'wide')

            if mode == 'double':
                return {0: multiply_double(x, y), 1: False, 'E': False}
            if mode != 'wide':
                raise ValueError(f"Unknown multiply mode '{mode}'")

            result = multiply_wide(x, y)
            return {0: result.value, 1: result.overflow, 'E': False}

        except Exception as e:
            logger.error(f"Multiply error: {e}")
            return {0: 0, 1: False, 'E': True, 'error': str(e)}
