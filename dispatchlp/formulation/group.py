"""
Group: units sharing a bus.

Group-level constraints tie the units together: a net-load balance and
aggregate reserve-capacity floors.
"""

import logging
from typing import List
from uuid import UUID

import numpy as np

from dispatchlp.formulation.columns import ColumnRange
from dispatchlp.formulation.composite import Composite
from dispatchlp.formulation.constraint import bound_constraint
from dispatchlp.formulation.contract import Placement
from dispatchlp.formulation.unit import Unit

logger = logging.getLogger(__name__)


class Group(Composite):
    """
    Ordered collection of units.

    The column offset of the i-th unit is the sum of the column sizes of
    units ``0..i-1``.

    Example:
        >>> g = Group(battery, generator)
        >>> g.new_constraint(g.net_load_constraint(12.5))
    """

    def __init__(self, *units: Unit):
        super().__init__(units)

    @property
    def units(self):
        return self.children

    def _placements(self, unit, column_range: ColumnRange, pid: UUID) -> List[Placement]:
        if unit.pid == pid:
            return [Placement(column_range.start, unit)]
        return []

    def _collect(self, locations, values=None):
        """Concatenate per-unit locations shifted into group space, with values."""
        loc, weights = [], []
        for unit, column_range in zip(self.units, self.column_ranges):
            loc.extend(column_range.shift(locations(unit)))
            if values is not None:
                weights.extend(values(unit))
        return loc, weights

    # Locations over all units

    def real_power_loc(self) -> List[int]:
        return self._collect(lambda u: u.real_power_loc())[0]

    def real_power_weights(self) -> List[float]:
        return self._collect(lambda u: u.real_power_loc(), lambda u: u.real_power_weights())[1]

    def real_positive_capacity_loc(self) -> List[int]:
        return self._collect(lambda u: u.real_positive_capacity_loc())[0]

    def real_negative_capacity_loc(self) -> List[int]:
        return self._collect(lambda u: u.real_negative_capacity_loc())[0]

    def real_positive_capacity(self) -> List[float]:
        return self._collect(
            lambda u: u.real_positive_capacity_loc(), lambda u: u.real_positive_capacity()
        )[1]

    def real_negative_capacity(self) -> List[float]:
        return self._collect(
            lambda u: u.real_negative_capacity_loc(), lambda u: u.real_negative_capacity()
        )[1]

    def stored_energy_loc(self) -> List[int]:
        return self._collect(
            lambda u: u.stored_energy_loc() if u.supports_storage else []
        )[0]

    # Constraint generation

    def net_load_constraint(self, target_load: float) -> np.ndarray:
        """
        Weighted sum of dispatched power equals ``target_load``.

        Args:
            target_load: Required net load on the bus

        Returns:
            Row bounded ``[target_load, target_load]``
        """
        c = np.zeros(self.column_size)
        for loc, weight in zip(self.real_power_loc(), self.real_power_weights()):
            c[loc] = weight
        return bound_constraint(c, target_load, target_load)

    def positive_capacity_constraint(self, target_capacity: float) -> np.ndarray:
        """Aggregate positive capacity of all units is at least ``target_capacity``."""
        c = np.zeros(self.column_size)
        for loc, capacity in zip(self.real_positive_capacity_loc(), self.real_positive_capacity()):
            c[loc] = capacity
        return bound_constraint(c, target_capacity, np.inf)

    def negative_capacity_constraint(self, target_capacity: float) -> np.ndarray:
        """Aggregate negative capacity of all units is at least ``target_capacity``."""
        c = np.zeros(self.column_size)
        for loc, capacity in zip(self.real_negative_capacity_loc(), self.real_negative_capacity()):
            c[loc] = capacity
        return bound_constraint(c, target_capacity, np.inf)
