"""
Tests for column ranges, row projection and row helpers
"""

import pytest
import numpy as np

from dispatchlp.formulation import (
    ColumnAllocator,
    ColumnRange,
    bound_constraint,
    coefficients,
    lower_bound,
    project_row,
    stack_rows,
    upper_bound,
)


class TestColumnAllocator:

    def test_consecutive_ranges(self):
        """Ranges follow each other without gaps or overlap."""
        allocator = ColumnAllocator()
        ranges = [allocator.allocate(size) for size in (4, 7, 0, 3)]

        assert [(r.start, r.stop) for r in ranges] == [(0, 4), (4, 11), (11, 11), (11, 14)]
        assert allocator.allocated == 14

    def test_negative_size_rejected(self):
        """Negative sizes are refused."""
        with pytest.raises(ValueError):
            ColumnAllocator().allocate(-1)

    def test_invalid_range_rejected(self):
        """A range cannot end before it starts."""
        with pytest.raises(ValueError):
            ColumnRange(5, 2)

    def test_shift(self):
        """Local columns are offset by the range start."""
        assert ColumnRange(4, 8).shift([0, 3]) == [4, 7]
        assert ColumnRange(4, 8).size == 4


class TestProjectRow:

    def test_projection_places_block_and_keeps_bounds(self):
        """Coefficients move into the range, bounds stay at the ends."""
        row = bound_constraint([1, 2, 3], -1, 5)
        projected = project_row(row, ColumnRange(2, 5), 7)

        np.testing.assert_array_equal(projected, [-1, 0, 0, 1, 2, 3, 0, 0, 5])

    def test_infinite_bounds_kept(self):
        """Infinite bounds survive projection."""
        row = bound_constraint([1], -np.inf, np.inf)
        projected = project_row(row, ColumnRange(0, 1), 3)

        assert projected[0] == -np.inf
        assert projected[-1] == np.inf

    def test_wrong_length_rejected(self):
        """A row must match the range width."""
        with pytest.raises(ValueError):
            project_row(np.zeros(4), ColumnRange(0, 3), 5)


class TestRowHelpers:

    def test_bound_constraint_accessors(self):
        """Bounds and coefficients are read back from a row."""
        row = bound_constraint([1.5, -2.0], 0.0, 3.0)

        assert lower_bound(row) == 0.0
        assert upper_bound(row) == 3.0
        np.testing.assert_array_equal(coefficients(row), [1.5, -2.0])

    def test_stack_rows_empty(self):
        """No rows still gives a matrix of the right width."""
        assert stack_rows([], 3).shape == (0, 5)

    def test_stack_rows(self):
        """Rows stack into a matrix."""
        rows = [bound_constraint([1, 0], 0, 1), bound_constraint([0, 1], 0, 1)]
        assert stack_rows(rows, 2).shape == (2, 4)
