"""
Formulation contract consumed by solver adapters.

Every composable level exposes the same shape: a cost vector, per-column
bounds, constraint rows and, for mixed-integer programs, an integrality mask.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, List, NamedTuple
from uuid import UUID

import numpy as np

if TYPE_CHECKING:
    from dispatchlp.formulation.unit import Unit


class LinearProgram(ABC):
    """Cost vector, bounds and constraint rows of a linear program."""

    @abstractmethod
    def cost_coefficients(self) -> np.ndarray:
        """Cost per column, shape ``(N,)``."""

    @abstractmethod
    def bounds(self) -> np.ndarray:
        """``[lower, upper]`` per column, shape ``(N, 2)``."""

    @abstractmethod
    def constraints(self) -> np.ndarray:
        """Rows ``[lb, c_1..c_N, ub]``, shape ``(M, N + 2)``."""

    @property
    @abstractmethod
    def column_size(self) -> int:
        """Number of decision variables."""


class MipLinearProgram(LinearProgram):
    """Linear program with an integrality mask (1 = integer, 0 = continuous)."""

    @abstractmethod
    def integrality(self) -> np.ndarray:
        """Integrality flag per column, shape ``(N,)``."""


class Placement(NamedTuple):
    """A unit and the offset of its first column in some parent's column space."""
    offset: int
    unit: "Unit"

    def shift(self, locations: Iterable[int]) -> List[int]:
        return [self.offset + loc for loc in locations]


class Sequencer(MipLinearProgram):
    """
    Element usable as a stage of a series.

    Stages are located by identity: ``locate(pid)`` returns every appearance of
    a unit, in column order, with offsets local to the stage.
    """

    @abstractmethod
    def locate(self, pid: UUID) -> List[Placement]:
        """All placements of the unit identified by ``pid``."""

    def real_power_pid_loc(self, pid: UUID) -> List[int]:
        loc = []
        for placement in self.locate(pid):
            loc.extend(placement.shift(placement.unit.real_power_loc()))
        return loc

    def real_power_pid_weights(self, pid: UUID) -> List[float]:
        weights = []
        for placement in self.locate(pid):
            weights.extend(placement.unit.real_power_weights())
        return weights

    def stored_energy_pid_loc(self, pid: UUID) -> List[int]:
        loc = []
        for placement in self.locate(pid):
            if placement.unit.supports_storage:
                loc.extend(placement.shift(placement.unit.stored_energy_loc()))
        return loc

    def stored_energy_capacity_pid(self, pid: UUID) -> List[float]:
        capacity = []
        for placement in self.locate(pid):
            if placement.unit.supports_storage:
                capacity.extend(placement.unit.stored_energy_capacity())
        return capacity
