"""
Block-concatenation shared by groups, clusters and series.

A composite owns an ordered tuple of children and one ``ColumnRange`` per
child. Costs, bounds and integrality are concatenated in child order; child
constraint rows are projected into the composite's column space and followed
by the composite's own rows.
"""

import logging
from typing import List, Sequence, Tuple
from uuid import UUID

import numpy as np

from dispatchlp.formulation.columns import ColumnAllocator, ColumnRange, project_row
from dispatchlp.formulation.constraint import ConstraintStore, stack_rows
from dispatchlp.formulation.contract import Placement, Sequencer

logger = logging.getLogger(__name__)


class Composite(ConstraintStore, Sequencer):
    """
    Ordered collection of formulation elements sharing one column space.

    Children are copied on construction, down to the units; later appends to
    a child or to any of its descendants do not reach this composite. The same
    child may therefore be passed several times (e.g. one group reused as
    every stage of a series).
    """

    def __init__(self, children: Sequence):
        self._children: Tuple = tuple(child.copy() for child in children)

        allocator = ColumnAllocator()
        self._ranges: Tuple[ColumnRange, ...] = tuple(
            allocator.allocate(child.column_size) for child in self._children
        )
        self._column_size = allocator.allocated
        self._init_constraints()

        logger.debug(
            f"{type(self).__name__}: {len(self._children)} children, "
            f"{self._column_size} columns"
        )

    @property
    def children(self) -> Tuple:
        return self._children

    @property
    def column_ranges(self) -> Tuple[ColumnRange, ...]:
        return self._ranges

    @property
    def column_size(self) -> int:
        return self._column_size

    def cost_coefficients(self) -> np.ndarray:
        if not self._children:
            return np.zeros(0)
        return np.concatenate([child.cost_coefficients() for child in self._children])

    def bounds(self) -> np.ndarray:
        if not self._children:
            return np.zeros((0, 2))
        return np.vstack([child.bounds() for child in self._children])

    def integrality(self) -> np.ndarray:
        if not self._children:
            return np.zeros(0, dtype=int)
        return np.concatenate([child.integrality() for child in self._children]).astype(int)

    def constraints(self) -> np.ndarray:
        rows = []
        for child, column_range in zip(self._children, self._ranges):
            for row in child.constraints():
                rows.append(project_row(row, column_range, self._column_size))
        rows.extend(self._constraints)
        return stack_rows(rows, self._column_size)

    def _placements(self, child, column_range: ColumnRange, pid: UUID) -> List[Placement]:
        return [
            Placement(column_range.start + p.offset, p.unit)
            for p in child.locate(pid)
        ]

    def locate(self, pid: UUID) -> List[Placement]:
        placements = []
        for child, column_range in zip(self._children, self._ranges):
            placements.extend(self._placements(child, column_range, pid))
        return placements

    def child_locate(self, pid: UUID) -> List[List[Placement]]:
        """Placements of ``pid`` grouped per child, in this composite's column space."""
        return [
            self._placements(child, column_range, pid)
            for child, column_range in zip(self._children, self._ranges)
        ]

    def copy(self):
        """Copy with independent constraint lists at every level below."""
        other = super().copy()
        other._children = tuple(child.copy() for child in self._children)
        return other

    def __len__(self) -> int:
        return len(self._children)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(children={len(self._children)}, columns={self._column_size})"
