"""
HiGHS adapter built on scipy.optimize.

Maps a formulation's ``(cost_coefficients, bounds, constraints, integrality)``
onto ``linprog(method='highs')`` for LPs and ``milp`` for mixed-integer
programs. The objective is always minimised.
"""

import logging
import time
from typing import List, Optional, Tuple

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, linprog, milp

from dispatchlp.config.solver_config import SolverConfig
from dispatchlp.exceptions import SolverError
from dispatchlp.formulation.contract import LinearProgram, MipLinearProgram
from dispatchlp.solvers.result import SolverResult

logger = logging.getLogger(__name__)


def split_constraints(rows: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Split ``[lb, c, ub]`` rows into linprog's equality and inequality blocks.

    Rows with ``lb == ub`` become equalities. Otherwise a finite upper bound
    gives ``c x <= ub`` and a finite lower bound gives ``-c x <= -lb``; rows
    unbounded on both sides are dropped.

    Args:
        rows: Constraint matrix of shape ``(M, N + 2)``

    Returns:
        ``(A_eq, b_eq, A_ub, b_ub)``
    """
    n = rows.shape[1] - 2
    A_eq: List[np.ndarray] = []
    b_eq: List[float] = []
    A_ub: List[np.ndarray] = []
    b_ub: List[float] = []

    for row in rows:
        lb, c, ub = row[0], row[1:-1], row[-1]
        if lb == ub:
            A_eq.append(c)
            b_eq.append(ub)
            continue
        if np.isfinite(ub):
            A_ub.append(c)
            b_ub.append(ub)
        if np.isfinite(lb):
            A_ub.append(-c)
            b_ub.append(-lb)

    def block(a, b):
        if not a:
            return np.zeros((0, n)), np.zeros(0)
        return np.vstack(a), np.array(b, dtype=float)

    return (*block(A_eq, b_eq), *block(A_ub, b_ub))


class HighsSolver:
    """
    Solves formulations with the HiGHS backend shipped in scipy.

    Example:
        >>> solver = HighsSolver(SolverConfig(time_limit_seconds=30))
        >>> result = solver.solve_mip(series)
        >>> result.to_series()
    """

    def __init__(self, config: Optional[SolverConfig] = None):
        self.config = config or SolverConfig()
        self.config.validate()

    def solve_lp(self, program: LinearProgram) -> SolverResult:
        """
        Solve the continuous relaxation of ``program``.

        Integrality flags, if any, are ignored.

        Raises:
            SolverError: If HiGHS does not report an optimal solution
        """
        c = program.cost_coefficients()
        A_eq, b_eq, A_ub, b_ub = split_constraints(program.constraints())
        bounds = [
            (None if np.isinf(lb) else lb, None if np.isinf(ub) else ub)
            for lb, ub in program.bounds()
        ]

        logger.info(
            f"Solving LP: {len(c)} variables, {len(b_eq)} equality constraints, "
            f"{len(b_ub)} inequality constraints"
        )

        start_time = time.time()
        result = linprog(
            c,
            A_ub=A_ub if len(b_ub) else None,
            b_ub=b_ub if len(b_ub) else None,
            A_eq=A_eq if len(b_eq) else None,
            b_eq=b_eq if len(b_eq) else None,
            bounds=bounds,
            method='highs',
            options=self.config.to_options(mip=False),
        )
        solve_time = time.time() - start_time

        return self._to_result(result, solve_time, "LP")

    def solve_mip(self, program: MipLinearProgram) -> SolverResult:
        """
        Solve ``program`` honouring its integrality mask.

        Raises:
            SolverError: If HiGHS does not report an optimal solution
        """
        c = program.cost_coefficients()
        rows = program.constraints()
        bounds = program.bounds()
        integrality = program.integrality()

        constraints = None
        if rows.shape[0] > 0:
            constraints = LinearConstraint(rows[:, 1:-1], rows[:, 0], rows[:, -1])

        logger.info(
            f"Solving MIP: {len(c)} variables ({int(integrality.sum())} integer), "
            f"{rows.shape[0]} constraints"
        )

        start_time = time.time()
        result = milp(
            c,
            integrality=integrality,
            bounds=Bounds(bounds[:, 0], bounds[:, 1]),
            constraints=constraints,
            options=self.config.to_options(mip=True),
        )
        solve_time = time.time() - start_time

        return self._to_result(result, solve_time, "MIP")

    def solve(self, program: LinearProgram) -> SolverResult:
        """Solve as a MIP when any column is integer, otherwise as an LP."""
        if isinstance(program, MipLinearProgram) and np.any(program.integrality()):
            return self.solve_mip(program)
        return self.solve_lp(program)

    @staticmethod
    def _to_result(result, solve_time: float, kind: str) -> SolverResult:
        if not result.success:
            logger.warning(f"{kind} solve failed (status {result.status}): {result.message}")
            raise SolverError(f"HiGHS failed: {result.message}")

        logger.info(f"{kind} solved in {solve_time:.3f}s, objective {result.fun:.6g}")
        return SolverResult(
            x=np.asarray(result.x, dtype=float),
            objective_value=float(result.fun),
            success=True,
            status=int(result.status),
            message=str(result.message),
            solve_time_seconds=solve_time,
        )


def solve_lp(program: LinearProgram, config: Optional[SolverConfig] = None) -> SolverResult:
    return HighsSolver(config).solve_lp(program)


def solve_mip(program: MipLinearProgram, config: Optional[SolverConfig] = None) -> SolverResult:
    return HighsSolver(config).solve_mip(program)
