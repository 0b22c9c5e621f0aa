"""
dispatchlp: LP/MIP formulation engine for scheduling power and energy assets.

Main Components:
    - formulation: units, groups, clusters and series
    - solvers: HiGHS adapter (scipy.optimize)
    - config: YAML-backed solver settings
"""

from .config import SolverConfig
from .exceptions import (
    ConstraintDimensionError,
    FormulationError,
    InvalidCapacityError,
    SolverError,
)
from .formulation import (
    BasicUnit,
    Cluster,
    CriticalPoint,
    EnergyStorageUnit,
    Group,
    PiecewiseUnit,
    Series,
)
from .solvers import HighsSolver, SolverResult, solve_lp, solve_mip

__version__ = "0.1.0"

__all__ = [
    "BasicUnit",
    "Cluster",
    "ConstraintDimensionError",
    "CriticalPoint",
    "EnergyStorageUnit",
    "FormulationError",
    "Group",
    "HighsSolver",
    "InvalidCapacityError",
    "PiecewiseUnit",
    "Series",
    "SolverConfig",
    "SolverError",
    "SolverResult",
    "solve_lp",
    "solve_mip",
]
