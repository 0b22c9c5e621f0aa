"""
Column ranges and row projection.

Composites ask a ``ColumnAllocator`` for one contiguous range per child at
construction time. Projecting a child row into the parent's column space is
then an explicit copy into that range.
"""

from dataclasses import dataclass
from typing import Iterable, List

import numpy as np


@dataclass(frozen=True)
class ColumnRange:
    """Half-open range ``[start, stop)`` of global column indices."""
    start: int
    stop: int

    def __post_init__(self):
        if self.start < 0 or self.stop < self.start:
            raise ValueError(f"Invalid column range [{self.start}, {self.stop})")

    @property
    def size(self) -> int:
        return self.stop - self.start

    def shift(self, locations: Iterable[int]) -> List[int]:
        """Map child-local column indices into the parent's column space."""
        return [self.start + loc for loc in locations]


class ColumnAllocator:
    """Hands out consecutive, non-overlapping column ranges."""

    def __init__(self, start: int = 0):
        self._next = start

    def allocate(self, size: int) -> ColumnRange:
        if size < 0:
            raise ValueError(f"Cannot allocate {size} columns")
        column_range = ColumnRange(self._next, self._next + size)
        self._next = column_range.stop
        return column_range

    @property
    def allocated(self) -> int:
        """Index of the next free column, i.e. the total allocated width."""
        return self._next


def project_row(row, column_range: ColumnRange, width: int) -> np.ndarray:
    """
    Project a child row into a parent of ``width`` columns.

    ``[lb, c_1..c_k, ub]`` placed at ``column_range`` becomes
    ``[lb, 0 x start, c_1..c_k, 0 x (width - stop), ub]``.
    """
    row = np.asarray(row, dtype=float)
    if row.shape[0] != column_range.size + 2:
        raise ValueError(
            f"Row of length {row.shape[0]} does not fit range of {column_range.size} columns"
        )

    projected = np.zeros(width + 2)
    projected[0] = row[0]
    projected[-1] = row[-1]
    projected[1 + column_range.start:1 + column_range.stop] = row[1:-1]
    return projected
