"""
RoundToInteger Block

Q8.8 to int8, round half away from zero.
"""

import logging
from blocks.base_block import BaseBlock
from blocks.input_helpers import get_raw
from fxsim.fixed_point import round_to_integer

logger = logging.getLogger(__name__)


class RoundToIntegerBlock(BaseBlock):

    @property
    def block_name(self):
        return "RoundToInteger"

    @property
    def category(self):
        return "Fixed-Point Primitives"

    @property
    def doc(self):
        return (
            "Round a Q8.8 value to the nearest int8."
            "\n\nTies round away from zero; results outside [-128, 127]"
            "\nsaturate and raise overflow."
            "\n\nInput: x"
            "\nOutputs: y, overflow"
        )

    @property
    def params(self):
        return {}

    @property
    def inputs(self):
        return [{"name": "x", "type": "raw"}]

    @property
    def outputs(self):
        return [
            {"name": "y", "type": "int8"},
            {"name": "overflow", "type": "bool"},
        ]

    def execute(self, time, inputs, params, **kwargs):
        try:
            result = round_to_integer(get_raw(inputs, 0))
            return {0: result.value, 1: result.overflow, 'E': False}

        except Exception as e:
            logger.error(f"RoundToInteger error: {e}")
            return {0: 0, 1: False, 'E': True, 'error': str(e)}
