"""
Fixed-Point Primitives Package

Clocked wrappers around the fxsim.fixed_point arithmetic so a datapath can be
assembled block by block and checked against the evaluator.

Every block outputs the raw result on port 0 and the saturation flag on
port 1.

Available blocks:
- AddSub: y = x1 + x2 or x1 - x2 in Q24.8
- Multiply: Q24.8 product, either clamped (wide) or full width (double)
- Clamp: Q48.16 to Q24.8 or Q8.8 with saturation
- CappedDiff: Q8.8 difference for the parameter update
- RoundToInteger: Q8.8 to int8, ties away from zero
- LessThan: signed comparison
"""

from blocks.fixed_point.add_sub import AddSubBlock
from blocks.fixed_point.multiply import MultiplyBlock
from blocks.fixed_point.clamp import ClampBlock
from blocks.fixed_point.capped_diff import CappedDiffBlock
from blocks.fixed_point.round_to_integer import RoundToIntegerBlock
from blocks.fixed_point.less_than import LessThanBlock

__all__ = [
    'AddSubBlock',
    'MultiplyBlock',
    'ClampBlock',
    'CappedDiffBlock',
    'RoundToIntegerBlock',
    'LessThanBlock',
]
