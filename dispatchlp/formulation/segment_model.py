"""
Piecewise-linear cost encoding for a single asset.

An asset's operating envelope is described by ``k`` critical points
``(x, cost)``. The model creates ``k`` continuous segment-flow columns followed
by ``k - 1`` binary segment-active columns:

    columns:  [flow_0 .. flow_{k-1}, bin_0 .. bin_{k-2}]

Constraints (incremental / delta encoding of a non-convex curve):

    partition     flow_i - bin_{i-1} - bin_i <= 0       (k rows)
    interpolation sum(flow_i) == 1                       (1 row)
    activation    sum(bin_j) == 1                        (1 row)

A flow may only be nonzero next to the single active binary, so the dispatch
point lies on exactly one linear piece between two adjacent critical points.
With one critical point there is no segment; only the interpolation row is
built.
"""

import logging
from typing import List, Sequence

import numpy as np

from dispatchlp.formulation.constraint import bound_constraint, stack_rows
from dispatchlp.formulation.critical_point import CriticalPoint

logger = logging.getLogger(__name__)


class SegmentModel:
    """
    Column block encoding one piecewise-linear cost curve.

    Args:
        critical_points: Breakpoints of the curve; sorted ascending by ``x``
        flow_upper_bound: Upper bound of the segment-flow columns
            (``1.0`` for convex-combination weights, ``np.inf`` for unbounded)

    Raises:
        ValueError: If no critical points are given
    """

    def __init__(self, critical_points: Sequence[CriticalPoint], flow_upper_bound: float = 1.0):
        if len(critical_points) == 0:
            raise ValueError("SegmentModel requires at least one critical point")
        if flow_upper_bound < 0:
            raise ValueError(f"flow_upper_bound must be non-negative, got {flow_upper_bound}")

        self.critical_points = tuple(sorted(critical_points, key=lambda cp: cp.x))
        self.flow_upper_bound = flow_upper_bound

        logger.debug(
            f"SegmentModel: {self.n_points} critical points -> "
            f"{self.n_points} flow + {self.n_binaries} binary columns"
        )

    @property
    def n_points(self) -> int:
        return len(self.critical_points)

    @property
    def n_binaries(self) -> int:
        return max(self.n_points - 1, 0)

    @property
    def column_size(self) -> int:
        return self.n_points + self.n_binaries

    def flow_loc(self) -> List[int]:
        return list(range(self.n_points))

    def binary_loc(self) -> List[int]:
        return list(range(self.n_points, self.column_size))

    def cost_coefficients(self) -> np.ndarray:
        c = np.zeros(self.column_size)
        c[:self.n_points] = [cp.cost for cp in self.critical_points]
        return c

    def bounds(self) -> np.ndarray:
        b = np.zeros((self.column_size, 2))
        b[:self.n_points, 1] = self.flow_upper_bound
        b[self.n_points:, 1] = 1.0
        return b

    def integrality(self) -> np.ndarray:
        mask = np.zeros(self.column_size, dtype=int)
        mask[self.n_points:] = 1
        return mask

    def partition_constraints(self, width: int) -> List[np.ndarray]:
        """
        One row per segment flow: flow_i may only be nonzero when an adjacent
        binary is active.
        """
        rows = []
        k = self.n_points
        for i in range(k):
            c = np.zeros(width)
            c[i] = 1.0
            if i < k - 1:
                c[k + i] = -1.0  # binary right of flow i
            if i > 0:
                c[k + i - 1] = -1.0  # binary left of flow i
            rows.append(bound_constraint(c, -np.inf, 0.0))
        return rows

    def interpolation_constraint(self, width: int) -> np.ndarray:
        c = np.zeros(width)
        c[:self.n_points] = 1.0
        return bound_constraint(c, 1.0, 1.0)

    def activation_constraint(self, width: int) -> np.ndarray:
        c = np.zeros(width)
        c[self.n_points:self.column_size] = 1.0
        return bound_constraint(c, 1.0, 1.0)

    def padded_constraints(self, width: int) -> np.ndarray:
        """
        All generated rows, widened to ``width`` columns.

        The segment block occupies the first ``column_size`` columns; any
        extra columns a unit appends after it get zero coefficients.

        Args:
            width: Column count of the owning unit (>= ``column_size``)

        Returns:
            Matrix of shape ``(k + 2, width + 2)``, or ``(1, width + 2)`` for a
            single critical point
        """
        if width < self.column_size:
            raise ValueError(f"width {width} smaller than segment block {self.column_size}")

        if self.n_points < 2:
            return stack_rows([self.interpolation_constraint(width)], width)

        rows = self.partition_constraints(width)
        rows.append(self.interpolation_constraint(width))
        rows.append(self.activation_constraint(width))
        return stack_rows(rows, width)
