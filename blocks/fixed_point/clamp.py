"""
Clamp Block

Narrows a Q48.16 product to Q24.8 or Q8.8 with saturation.
"""

import logging
from blocks.base_block import BaseBlock
from blocks.input_helpers import get_raw
from fxsim.fixed_point import clamp_double_to_narrow, clamp_double_to_wide

logger = logging.getLogger(__name__)

_CLAMPS = {
    'wide': clamp_double_to_wide,
    'narrow': clamp_double_to_narrow,
}


class ClampBlock(BaseBlock):
    """Drops 8 fractional bits (arithmetic shift) and saturates to the target format."""

    @property
    def block_name(self):
        return "Clamp"

    @property
    def category(self):
        return "Fixed-Point Primitives"

    @property
    def doc(self):
        return (
            "Clamp a double-wide value."
            "\n\nParameters:"
            "\n- target: 'wide' (Q24.8) or 'narrow' (Q8.8)"
            "\n\nInput: x (Q48.16)"
            "\nOutputs: y, overflow"
        )

    @property
    def params(self):
        return {
            "target": {
                "type": "choice",
                "default": "wide",
                "options": list(_CLAMPS),
                "doc": "Target format"
            },
        }

    @property
    def inputs(self):
        return [{"name": "x", "type": "raw"}]

    @property
    def outputs(self):
        return [
            {"name": "y", "type": "raw"},
            {"name": "overflow", "type": "bool"},
        ]

    def execute(self, time, inputs, params, **kwargs):
        try:
            target = params.get('target', 'wide')
            if target not in _CLAMPS:
                raise ValueError(f"Unknown clamp target '{target}'")

            result = _CLAMPS[target](get_raw(inputs, 0))
            return {0: result.value, 1: result.overflow, 'E': False}

        except Exception as e:
            logger.error(f"Clamp error: {e}")
            return {0: 0, 1: False, 'E': True, 'error': str(e)}
