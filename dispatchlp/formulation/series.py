"""
Series: time-ordered stages of a formulation.

Each stage is a group or cluster describing one discretised time step. The
same physical asset (same ``pid``) recurs in every stage; stored energy is
carried from one stage to the next with equality constraints:

    E_0                         = initial_energy
    E_i - dt * P_i - E_{i+1}    = 0            for i in 0 .. n-2

where ``E_i`` is the stored energy (column value times energy capacity) and
``P_i`` the weighted real power of the asset at stage ``i``. Positive power
discharges the store, negative power charges it.
"""

import logging
from typing import List
from uuid import UUID

import numpy as np

from dispatchlp.formulation.composite import Composite
from dispatchlp.formulation.constraint import bound_constraint
from dispatchlp.formulation.contract import Placement, Sequencer

logger = logging.getLogger(__name__)


class Series(Composite):
    """Ordered sequence of stages."""

    def __init__(self, *stages: Sequencer):
        super().__init__(stages)

    @property
    def stages(self):
        return self.children

    def _storage_placements(self, pid: UUID) -> List[Placement]:
        """
        First storage-capable appearance of ``pid`` in every stage.

        Raises:
            ValueError: If the series is empty or a stage holds no storage for ``pid``
        """
        if not self.stages:
            raise ValueError("Series has no stages")
        return [self._stage_storage_placement(i, pid) for i in range(len(self.stages))]

    def _stage_storage_placement(self, index: int, pid: UUID) -> Placement:
        """First storage-capable appearance of ``pid`` in stage ``index``, in series space."""
        if index >= len(self.stages):
            raise ValueError("Series has no stages")

        stage_placements = self._placements(self.stages[index], self.column_ranges[index], pid)
        storage = [p for p in stage_placements if p.unit.supports_storage]
        if not storage:
            raise ValueError(f"Stage {index} has no storage-capable unit with pid {pid}")
        return storage[0]

    def battery_initial_energy_constraint(self, pid: UUID, initial_energy: float) -> np.ndarray:
        """
        Pin the stored energy of ``pid`` at stage 0.

        Args:
            pid: Identity of the storage unit
            initial_energy: Stored energy at the first stage (energy units)

        Returns:
            Row bounded ``[initial_energy, initial_energy]``
        """
        placement = self._stage_storage_placement(0, pid)
        unit = placement.unit

        c = np.zeros(self.column_size)
        for loc, capacity in zip(placement.shift(unit.stored_energy_loc()), unit.stored_energy_capacity()):
            c[loc] = capacity
        return bound_constraint(c, initial_energy, initial_energy)

    def battery_energy_constraints(self, pid: UUID, dt: float, require_uniform: bool = False) -> List[np.ndarray]:
        """
        State-of-charge recursion between adjacent stages.

        Power weights and energy capacity are read from each stage, so a unit
        may change its curve or capacity over time.

        Args:
            pid: Identity of the storage unit
            dt: Duration of one stage (e.g. hours)
            require_uniform: Raise if the unit's power weights or energy
                capacity differ between stages

        Returns:
            One row bounded ``[0, 0]`` per adjacent stage pair

        Raises:
            ValueError: If a stage lacks the unit, or ``require_uniform`` is
                set and the unit differs between stages
        """
        placements = self._storage_placements(pid)

        if require_uniform:
            self._check_uniform(pid, placements)

        rows = []
        for current, following in zip(placements[:-1], placements[1:]):
            c = np.zeros(self.column_size)

            unit = current.unit
            for loc, weight in zip(current.shift(unit.real_power_loc()), unit.real_power_weights()):
                c[loc] += -dt * weight
            for loc, capacity in zip(current.shift(unit.stored_energy_loc()), unit.stored_energy_capacity()):
                c[loc] += capacity

            unit = following.unit
            for loc, capacity in zip(following.shift(unit.stored_energy_loc()), unit.stored_energy_capacity()):
                c[loc] += -capacity

            rows.append(bound_constraint(c, 0.0, 0.0))

        logger.debug(f"Built {len(rows)} battery energy constraints for {pid} (dt={dt})")
        return rows

    @staticmethod
    def _check_uniform(pid: UUID, placements: List[Placement]) -> None:
        first = placements[0].unit
        for i, placement in enumerate(placements[1:], start=1):
            unit = placement.unit
            if (unit.real_power_weights() != first.real_power_weights()
                    or unit.stored_energy_capacity() != first.stored_energy_capacity()):
                raise ValueError(
                    f"Unit {pid} differs between stage 0 and stage {i}: "
                    f"power weights or energy capacity changed"
                )
