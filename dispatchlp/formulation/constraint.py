"""
Constraint row helpers and the validated, append-only constraint store.

A row is laid out as ``[lower_bound, c_1, ..., c_N, upper_bound]`` so every
row of an ``N`` column program has ``N + 2`` entries.
"""

import copy
import logging
from typing import Iterable, List

import numpy as np

from dispatchlp.exceptions import ConstraintDimensionError

logger = logging.getLogger(__name__)


def bound_constraint(coefficients, lower: float, upper: float) -> np.ndarray:
    """Wrap a coefficient vector with its lower and upper bound."""
    coefficients = np.asarray(coefficients, dtype=float)
    return np.concatenate(([lower], coefficients, [upper]))


def lower_bound(row) -> float:
    return float(row[0])


def upper_bound(row) -> float:
    return float(row[-1])


def coefficients(row) -> np.ndarray:
    """Return the coefficients of a row without its bounds."""
    return np.asarray(row, dtype=float)[1:-1]


def stack_rows(rows: Iterable[np.ndarray], column_size: int) -> np.ndarray:
    """Stack rows into an ``(M, column_size + 2)`` matrix, ``M`` may be zero."""
    rows = list(rows)
    if not rows:
        return np.zeros((0, column_size + 2))
    return np.vstack(rows)


class ConstraintStore:
    """
    Mixin holding rows appended directly to a formulation element.

    Subclasses provide ``column_size``. Appends are validated as a batch:
    one malformed row rejects the batch and leaves the store untouched.

    A built element is owned by whoever appends to it. Parents snapshot their
    children with ``copy()`` when composed, so appending to a child after it
    has been placed in a parent never changes that parent.
    """

    _constraints: List[np.ndarray]

    def _init_constraints(self) -> None:
        self._constraints = []

    def _validate_rows(self, rows) -> List[np.ndarray]:
        expected = self.column_size + 2
        validated = []
        for i, row in enumerate(rows):
            row = np.asarray(row, dtype=float)
            actual = row.shape[0] if row.ndim == 1 else row.size
            if row.ndim != 1 or actual != expected:
                raise ConstraintDimensionError(i, actual, expected)
            validated.append(row.copy())
        return validated

    def new_constraint(self, *rows) -> None:
        """
        Append one or more constraint rows.

        Args:
            *rows: Rows of length ``column_size + 2``

        Raises:
            ConstraintDimensionError: If any row has the wrong length
        """
        validated = self._validate_rows(rows)
        self._constraints.extend(validated)
        logger.debug(
            f"{type(self).__name__}: appended {len(validated)} constraint(s), "
            f"{len(self._constraints)} total"
        )

    def with_constraints(self, *rows):
        """Return a copy with ``rows`` appended; the receiver is not modified."""
        other = self.copy()
        other.new_constraint(*rows)
        return other

    def own_constraints(self) -> np.ndarray:
        """Rows appended directly to this element, in append order."""
        return stack_rows(self._constraints, self.column_size)

    def copy(self):
        """Shallow copy with an independent constraint list."""
        other = copy.copy(self)
        other._constraints = [row.copy() for row in self._constraints]
        return other
