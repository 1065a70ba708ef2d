"""Tests for the fixed-point primitive blocks."""

import numpy as np
import pytest

from blocks.fixed_point import (
    AddSubBlock,
    CappedDiffBlock,
    ClampBlock,
    LessThanBlock,
    MultiplyBlock,
    RoundToIntegerBlock,
)
from fxsim.fixed_point import WIDE_MAX


class TestAddSubBlock:

    def setup_method(self):
        self.block = AddSubBlock()

    def test_block_properties(self):
        assert self.block.block_name == "AddSub"
        assert self.block.category == "Fixed-Point Primitives"
        assert len(self.block.inputs) == 3
        assert len(self.block.outputs) == 2

    def test_add(self):
        result = self.block.execute(0, {0: 256, 1: 512}, self.block.default_params())
        assert result[0] == 768
        assert result[1] is False
        assert result['E'] is False

    def test_subtract_param(self):
        result = self.block.execute(0, {0: 256, 1: 512}, {'subtract': True})
        assert result[0] == -256

    def test_is_sub_port_overrides_param(self):
        result = self.block.execute(0, {0: 256, 1: 512, 2: True}, {'subtract': False})
        assert result[0] == -256

    def test_saturation_flag(self):
        result = self.block.execute(0, {0: WIDE_MAX, 1: 1}, {})
        assert result[0] == WIDE_MAX
        assert result[1] is True

    def test_numpy_inputs(self):
        result = self.block.execute(0, {0: np.int64(3), 1: np.array([4])}, {})
        assert result[0] == 7


class TestMultiplyBlock:

    def setup_method(self):
        self.block = MultiplyBlock()

    def test_wide(self):
        result = self.block.execute(0, {0: 512, 1: 384}, {'mode': 'wide'})
        assert result[0] == 768
        assert result['E'] is False

    def test_double(self):
        result = self.block.execute(0, {0: 512, 1: 384}, {'mode': 'double'})
        assert result[0] == 512 * 384
        assert result[1] is False

    def test_wide_overflow(self):
        result = self.block.execute(0, {0: WIDE_MAX, 1: 512}, {'mode': 'wide'})
        assert result[0] == WIDE_MAX
        assert result[1] is True

    def test_unknown_mode_reports_error(self):
        result = self.block.execute(0, {0: 1, 1: 1}, {'mode': 'triple'})
        assert result['E'] is True
        assert 'triple' in result['error']


class TestClampBlock:

    def setup_method(self):
        self.block = ClampBlock()

    def test_narrow(self):
        result = self.block.execute(0, {0: 40000 << 8}, {'target': 'narrow'})
        assert result[0] == 32767
        assert result[1] is True

    def test_wide(self):
        result = self.block.execute(0, {0: 768 << 8}, {'target': 'wide'})
        assert result[0] == 768
        assert result[1] is False

    def test_bad_target(self):
        result = self.block.execute(0, {0: 0}, {'target': 'int8'})
        assert result['E'] is True


class TestCappedDiffBlock:

    def test_saturates(self):
        block = CappedDiffBlock()
        result = block.execute(0, {0: 32767, 1: -32768}, {})
        assert result[0] == 32767
        assert result[1] is True

    def test_plain(self):
        result = CappedDiffBlock().execute(0, {0: 512, 1: -128}, {})
        assert result[0] == 640
        assert result[1] is False


class TestRoundToIntegerBlock:

    def test_tie_and_overflow(self):
        block = RoundToIntegerBlock()
        assert block.execute(0, {0: 640}, {})[0] == 3
        result = block.execute(0, {0: 32640}, {})
        assert result[0] == 127
        assert result[1] is True


class TestLessThanBlock:

    def test_strict(self):
        block = LessThanBlock()
        assert block.execute(0, {0: -1, 1: 0}, {})[0] is True
        assert block.execute(0, {0: 0, 1: 0}, {})[0] is False
