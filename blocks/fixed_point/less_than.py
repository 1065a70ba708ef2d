"""
LessThan Block

Strict signed comparison of two raw values.
"""

import logging
from blocks.base_block import BaseBlock
from blocks.input_helpers import get_raw
from fxsim.fixed_point import less_than

logger = logging.getLogger(__name__)


class LessThanBlock(BaseBlock):

    @property
    def block_name(self):
        return "LessThan"

    @property
    def category(self):
        return "Fixed-Point Primitives"

    @property
    def doc(self):
        return "y = x1 < x2 (strict, signed).\n\nInputs: x1, x2\nOutput: y"

    @property
    def params(self):
        return {}

    @property
    def inputs(self):
        return [
            {"name": "x1", "type": "raw"},
            {"name": "x2", "type": "raw"},
        ]

    @property
    def outputs(self):
        return [{"name": "y", "type": "bool"}]

    def execute(self, time, inputs, params, **kwargs):
        try:
            return {0: less_than(get_raw(inputs, 0), get_raw(inputs, 1)), 'E': False}

        except Exception as e:
            logger.error(f"LessThan error: {e}")
            return {0: False, 'E': True, 'error': str(e)}
