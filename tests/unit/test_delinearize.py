#!/usr/bin/env python3
"""
Tests for delinearization of flat byte intervals
"""

import pytest

from memrange.analysis.delinearize import delinearize
from memrange.shared.location import Dimension, LocKind, MemoryLocationRange


@pytest.fixture
def matrix(loc):
    """int A[4][8]"""
    return loc("A dims(0 count 4 of 4, 0 count 8 of 8) elem 4")


class TestRecoveredShapes:
    """Intervals that map onto a rectangular region"""

    def test_whole_rows(self, matrix, loc):
        result = delinearize(matrix, loc("A bytes [32, 96)"))
        assert result.kind is LocKind.COLLAPSED
        assert result.dims == (Dimension(1, 1, 2, 4), Dimension(0, 1, 8, 8))
        assert result.element_size == 4
        assert result.ptr == "A"

    def test_part_of_one_row(self, matrix, loc):
        result = delinearize(matrix, loc("A bytes [40, 48)"))
        assert result.dims == (Dimension(1, 1, 1, 4), Dimension(2, 1, 2, 8))

    def test_whole_object(self, matrix, loc):
        result = delinearize(matrix, loc("A bytes [0, 128)"))
        assert result.dims == (Dimension(0, 1, 4, 4), Dimension(0, 1, 8, 8))

    def test_unknown_outer_size(self, loc):
        source = loc("A dims(0 count 4 of 0, 0 count 8 of 8) elem 4")
        result = delinearize(source, loc("A bytes [256, 288)"))
        assert result.dims == (Dimension(8, 1, 1, 0), Dimension(0, 1, 8, 8))

    def test_three_axes_full_inner_planes(self, loc):
        source = loc("A dims(0 count 2 of 2, 0 count 3 of 3, 0 count 4 of 4) elem 1")
        result = delinearize(source, loc("A bytes [12, 24)"))
        assert result.dims == (Dimension(1, 1, 1, 2), Dimension(0, 1, 3, 3), Dimension(0, 1, 4, 4))

    def test_one_dimensional(self, loc):
        source = loc("A dims(0 count 10 of 10) elem 8")
        result = delinearize(source, loc("A bytes [16, 40)"))
        assert result.dims == (Dimension(2, 1, 3, 10),)

    def test_inputs_are_not_modified(self, matrix, loc):
        target = loc("A bytes [32, 96)")
        delinearize(matrix, target)
        assert target.kind is LocKind.DEFAULT
        assert target.dims == ()


class TestRejected:
    """Any failed precondition leaves the interval flat"""

    def test_spans_partial_rows(self, matrix, loc):
        assert delinearize(matrix, loc("A bytes [40, 72)")) is None

    def test_partially_covered_middle_axis(self, loc):
        source = loc("A dims(0 count 2 of 2, 0 count 3 of 3, 0 count 4 of 4) elem 1")
        assert delinearize(source, loc("A bytes [4, 12)")) is None

    def test_misaligned_bounds(self, matrix, loc):
        assert delinearize(matrix, loc("A bytes [2, 10)")) is None

    def test_open_bound(self, matrix, loc):
        assert delinearize(matrix, loc("A bytes [0, )")) is None

    def test_empty_interval(self, matrix, loc):
        assert delinearize(matrix, loc("A bytes [8, 8)")) is None

    def test_beyond_the_object(self, matrix, loc):
        assert delinearize(matrix, loc("A bytes [128, 136)")) is None

    def test_unknown_element_size(self, loc):
        source = loc("A dims(0 count 4 of 4)")
        assert delinearize(source, loc("A bytes [0, 4)")) is None

    def test_unknown_inner_size(self, loc):
        source = loc("A dims(0 count 4 of 4, 0 count 1 of 0) elem 4")
        assert delinearize(source, loc("A bytes [0, 4)")) is None

    def test_wrong_kinds(self, matrix, loc):
        assert delinearize(loc("A bytes [0, 8)"), loc("A bytes [0, 8)")) is None
        assert delinearize(matrix, matrix) is None
        assert delinearize(matrix, MemoryLocationRange(ptr="A", kind=LocKind.NON_COLLAPSABLE)) is None
