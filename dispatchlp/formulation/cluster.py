"""
Cluster: groups formulated together, with cross-group constraints.
"""

import logging
from typing import List
from uuid import UUID

import numpy as np

from dispatchlp.formulation.composite import Composite
from dispatchlp.formulation.constraint import bound_constraint
from dispatchlp.formulation.group import Group

logger = logging.getLogger(__name__)


class Cluster(Composite):
    """Ordered collection of groups."""

    def __init__(self, *groups: Group):
        super().__init__(groups)

    @property
    def groups(self):
        return self.children

    def linked_bus_constraints(self, pid: UUID) -> List[np.ndarray]:
        """
        Tie a device that is wired to two buses.

        The device appears once in each of two groups. Its power in the first
        appearance is constrained equal to its power in the second::

            bus 1   device   bus 2
            -------->-O->--------
            sum(w * p_first) - sum(w * p_second) = 0

        Args:
            pid: Identity of the shared device

        Returns:
            A list with one row bounded ``[0, 0]``, or an empty list when the
            device does not appear exactly once in exactly two groups
        """
        per_group = [placements for placements in self.child_locate(pid) if placements]

        if len(per_group) != 2 or any(len(placements) != 1 for placements in per_group):
            logger.warning(
                f"Linked bus constraint skipped: unit {pid} appears in {len(per_group)} group(s) "
                f"with {sum(len(p) for p in per_group)} appearance(s), expected one in each of two groups"
            )
            return []

        c = np.zeros(self.column_size)
        for sign, placements in zip((1.0, -1.0), per_group):
            placement = placements[0]
            unit = placement.unit
            for loc, weight in zip(placement.shift(unit.real_power_loc()), unit.real_power_weights()):
                c[loc] = sign * weight

        return [bound_constraint(c, 0.0, 0.0)]
