"""
Solver adapters for dispatchlp formulations.

Main Components:
    - HighsSolver: LP/MIP solves through scipy's HiGHS backend
    - SolverResult: primal vector, objective and solve metadata
"""

from .highs_adapter import HighsSolver, solve_lp, solve_mip, split_constraints
from .result import SolverResult

__all__ = [
    "HighsSolver",
    "SolverResult",
    "solve_lp",
    "solve_mip",
    "split_constraints",
]
