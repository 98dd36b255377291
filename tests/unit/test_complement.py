#!/usr/bin/env python3
"""
Tests for the bounded complement of an axis and one of its sub-ranges
"""

import pytest

from memrange.analysis.complement import check_subset, difference
from memrange.shared.errors import PreconditionError
from memrange.shared.location import Dimension


def assert_partition(dim, sub, fragments):
    """Fragments are pairwise disjoint and, with sub, cover dim exactly"""
    seen = set(sub)
    for fragment in fragments:
        assert fragment.is_valid()
        assert fragment.dim_size == dim.dim_size
        indices = set(fragment)
        assert not indices & seen, f"{fragment} overlaps previous fragments"
        seen |= indices
    assert seen == set(dim)


class TestDifference:
    """Left, right and skipped-phase fragments"""

    def test_odd_indices(self):
        dim = Dimension(0, 1, 10, 10)
        sub = Dimension(0, 2, 5, 10)
        assert difference(dim, sub, threshold=10) == [Dimension(1, 2, 5, 10)]

    def test_neighbours_join_skipped_phases(self):
        dim = Dimension(0, 1, 10, 10)
        sub = Dimension(3, 3, 2, 10)
        fragments = difference(dim, sub, threshold=10)
        assert fragments == [
            Dimension(0, 1, 1, 10),
            Dimension(1, 3, 3, 10),
            Dimension(2, 3, 3, 10),
            Dimension(9, 1, 1, 10),
        ]
        assert_partition(dim, sub, fragments)

    def test_single_element(self):
        dim = Dimension(0, 1, 10, 10)
        sub = Dimension(4, 1, 1, 10)
        assert difference(dim, sub, threshold=0) == [Dimension(0, 1, 4, 10), Dimension(5, 1, 5, 10)]

    def test_single_element_with_coarse_step(self):
        dim = Dimension(0, 1, 10, 10)
        sub = Dimension(5, 100, 1, 10)
        fragments = difference(dim, sub, threshold=0)
        assert_partition(dim, sub, fragments)
        assert len(fragments) == 2

    def test_equal_ranges_leave_nothing(self):
        dim = Dimension(2, 3, 4, 20)
        assert difference(dim, dim, threshold=0) == []

    def test_strided_container(self):
        dim = Dimension(1, 2, 10, 30)
        sub = Dimension(5, 6, 3, 30)
        fragments = difference(dim, sub, threshold=10)
        assert_partition(dim, sub, fragments)

    @pytest.mark.parametrize("dim,sub", [
        (Dimension(0, 1, 20, 20), Dimension(0, 4, 5, 20)),
        (Dimension(0, 1, 20, 20), Dimension(7, 5, 2, 20)),
        (Dimension(3, 2, 9, 0), Dimension(7, 6, 2, 0)),
        (Dimension(0, 3, 7, 21), Dimension(0, 9, 3, 21)),
        (Dimension(0, 1, 20, 20), Dimension(19, 1, 1, 20)),
    ])
    def test_partitions(self, dim, sub):
        assert_partition(dim, sub, difference(dim, sub, threshold=10))


class TestThreshold:
    """The number of skipped-phase fragments is bounded"""

    def test_overflow_is_signalled(self):
        dim = Dimension(0, 1, 100, 100)
        sub = Dimension(0, 50, 2, 100)
        assert difference(dim, sub, threshold=10) is None

    def test_budget_exactly_met(self):
        dim = Dimension(0, 1, 100, 100)
        sub = Dimension(0, 50, 2, 100)
        fragments = difference(dim, sub, threshold=49)
        assert len(fragments) == 49
        assert_partition(dim, sub, fragments)

    def test_single_element_never_overflows(self):
        dim = Dimension(0, 1, 100, 100)
        sub = Dimension(10, 1000, 1, 100)
        assert difference(dim, sub, threshold=0) is not None


class TestPreconditions:
    """Sub-range must be a stride-aligned subset"""

    def test_step_not_a_multiple(self):
        with pytest.raises(PreconditionError):
            check_subset(Dimension(0, 2, 5, 10), Dimension(0, 3, 2, 10))

    def test_misaligned_start(self):
        with pytest.raises(PreconditionError):
            difference(Dimension(0, 2, 5, 10), Dimension(1, 2, 2, 10), threshold=10)

    def test_outside_the_container(self):
        with pytest.raises(PreconditionError):
            difference(Dimension(0, 1, 5, 10), Dimension(3, 1, 4, 10), threshold=10)

    def test_precondition_error_is_an_assertion(self):
        with pytest.raises(AssertionError):
            check_subset(Dimension(0, 2, 5, 10), Dimension(0, 3, 2, 10))
