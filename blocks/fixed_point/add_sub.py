"""
AddSub Block

Saturating Q24.8 adder/subtractor.
"""

import logging
from blocks.base_block import BaseBlock
from blocks.input_helpers import get_raw, get_flag
from fxsim.fixed_point import add_sub

logger = logging.getLogger(__name__)


class AddSubBlock(BaseBlock):
    """
    Adds or subtracts two wide operands.

    The operation can be fixed with the 'subtract' parameter or driven per
    tick from the optional third input port.
    """

    @property
    def block_name(self):
        return "AddSub"

    @property
    def category(self):
        return "Fixed-Point Primitives"

    @property
    def doc(self):
        return (
            "Saturating Q24.8 add or subtract."
            "\n\nParameters:"
            "\n- subtract: Compute x1 - x2 instead of x1 + x2"
            "\n\nInputs: x1, x2, is_sub (optional, overrides 'subtract')"
            "\nOutputs: y, overflow"
        )

    @property
    def params(self):
        return {
            "subtract": {
                "type": "bool",
                "default": False,
                "doc": "Subtract the second operand"
            },
        }

    @property
    def inputs(self):
        return [
            {"name": "x1", "type": "raw"},
            {"name": "x2", "type": "raw"},
            {"name": "is_sub", "type": "bool"},
        ]

    @property
    def outputs(self):
        return [
            {"name": "y", "type": "raw"},
            {"name": "overflow", "type": "bool"},
        ]

    @property
    def optional_inputs(self):
        return [2]

    def execute(self, time, inputs, params, **kwargs):
        try:
            x = get_raw(inputs, 0)
            y = get_raw(inputs, 1)
            is_sub = get_flag(inputs, 2, default=params.get('subtract', False))

            result = add_sub(x, y, is_sub=is_sub)
            return {0: result.value, 1: result.overflow, 'E': False}

        except Exception as e:
            logger.error(f"AddSub error: {e}")
            return {0: 0, 1: False, 'E': True, 'error': str(e)}
