"""
CappedDiff Block

Narrow Q8.8 difference used for the parameter update p - delta.
"""

import logging
from blocks.base_block import BaseBlock
from blocks.input_helpers import get_raw
from fxsim.fixed_point import capped_diff

logger = logging.getLogger(__name__)


class CappedDiffBlock(BaseBlock):
    """y = x1 - x2, saturated to [-32768, 32767]."""

    @property
    def block_name(self):
        return "CappedDiff"

    @property
    def category(self):
        return "Fixed-Point Primitives"

    @property
    def doc(self):
        return (
            "Saturating Q8.8 subtraction."
            "\n\nInputs: x1, x2"
            "\nOutputs: y, overflow"
        )

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
        return [
            {"name": "y", "type": "raw"},
            {"name": "overflow", "type": "bool"},
        ]

    def execute(self, time, inputs, params, **kwargs):
        try:
            result = capped_diff(get_raw(inputs, 0), get_raw(inputs, 1))
            return {0: result.value, 1: result.overflow, 'E': False}

        except Exception as e:
            logger.error(f"CappedDiff error: {e}")
            return {0: 0, 1: False, 'E': True, 'error': str(e)}
