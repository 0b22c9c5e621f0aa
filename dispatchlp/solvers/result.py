"""
Result container returned by the solver adapters.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass
class SolverResult:
    """
    Primal solution of one solve.

    ``x`` is indexed by global column, in the order of the formulation's
    cost vector.
    """
    x: np.ndarray
    objective_value: float

    # Metadata
    success: bool = True
    status: int = 0
    message: str = ""
    solve_time_seconds: float = 0.0

    def to_series(self) -> pd.Series:
        """Solution as a Series indexed by column number."""
        return pd.Series(
            self.x,
            index=pd.RangeIndex(len(self.x), name='column'),
            name='x',
        )
