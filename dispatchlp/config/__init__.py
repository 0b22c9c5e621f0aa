"""
Configuration for dispatchlp solver adapters.

Usage:
    >>> from dispatchlp.config import SolverConfig
    >>> config = SolverConfig.from_yaml("configs/solver.yaml")
    >>> config.to_options(mip=True)
"""

from .solver_config import SolverConfig

__all__ = [
    "SolverConfig",
]
