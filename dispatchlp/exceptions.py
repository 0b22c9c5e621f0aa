"""
Error taxonomy for the formulation engine and solver adapters.
"""


class FormulationError(Exception):
    """Base class for errors raised while building a formulation."""


class ConstraintDimensionError(FormulationError, ValueError):
    """
    Raised when an appended constraint row does not match the receiver's width.

    The whole batch is rejected; the receiver's constraints are left unchanged.
    """

    def __init__(self, row_index: int, actual: int, expected: int):
        self.row_index = row_index
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"constraint contains {actual} columns, expected: {expected} "
            f"(row {row_index} of batch)"
        )


class InvalidCapacityError(FormulationError, ValueError):
    """Raised when a unit is declared with a negative capacity or bound."""


class SolverError(RuntimeError):
    """Raised when the external solver fails to return an optimal solution."""
