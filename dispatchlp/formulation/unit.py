"""
Units: the smallest composable formulation elements.

Three variants share the ``Unit`` interface:

- ``BasicUnit``: four continuous columns
  ``[positive power, negative power, capacity, stored energy]``.
- ``PiecewiseUnit``: a segment model (piecewise-linear cost curve) followed by
  a positive and a negative capacity column.
- ``EnergyStorageUnit``: a piecewise unit with one extra stored-energy column
  holding state of charge as a fraction of the declared energy capacity.

Composites never type-switch on the variant. Storage is a capability queried
through ``supports_storage``; every location a parent needs is exposed through
the ``*_loc()`` / weight methods, local to the unit.
"""

import logging
import uuid
from abc import abstractmethod
from typing import List, Optional, Sequence

import numpy as np

from dispatchlp.exceptions import InvalidCapacityError
from dispatchlp.formulation.constraint import ConstraintStore, bound_constraint
from dispatchlp.formulation.contract import MipLinearProgram
from dispatchlp.formulation.critical_point import CriticalPoint
from dispatchlp.formulation.segment_model import SegmentModel

logger = logging.getLogger(__name__)


class Unit(ConstraintStore, MipLinearProgram):
    """
    Abstract base for all unit variants.

    Column layout (costs, bounds, integrality) is frozen at construction.
    Constraint rows may be appended afterwards with ``new_constraint``.
    """

    supports_storage: bool = False

    def __init__(self, pid: Optional[uuid.UUID] = None):
        self._pid = pid if pid is not None else uuid.uuid4()
        self._coefficients = np.zeros(0)
        self._bounds = np.zeros((0, 2))
        self._integrality = np.zeros(0, dtype=int)
        self._init_constraints()

    @property
    def pid(self) -> uuid.UUID:
        """Identity tying this unit to its physical asset."""
        return self._pid

    @property
    def column_size(self) -> int:
        return len(self._coefficients)

    def cost_coefficients(self) -> np.ndarray:
        return self._coefficients.copy()

    def bounds(self) -> np.ndarray:
        return self._bounds.copy()

    def integrality(self) -> np.ndarray:
        return self._integrality.copy()

    def constraints(self) -> np.ndarray:
        return self.own_constraints()

    # Locations (local column indices)

    @abstractmethod
    def real_power_loc(self) -> List[int]:
        """Columns contributing to the unit's real power."""

    @abstractmethod
    def real_power_weights(self) -> List[float]:
        """Power contributed per unit of each ``real_power_loc()`` column."""

    @abstractmethod
    def real_positive_capacity_loc(self) -> List[int]:
        pass

    @abstractmethod
    def real_negative_capacity_loc(self) -> List[int]:
        pass

    @abstractmethod
    def real_positive_capacity(self) -> List[float]:
        """Declared positive capacity magnitude per positive capacity column."""

    @abstractmethod
    def real_negative_capacity(self) -> List[float]:
        """Declared negative capacity magnitude per negative capacity column."""

    def stored_energy_loc(self) -> List[int]:
        return []

    def stored_energy_capacity(self) -> List[float]:
        """Energy represented by one unit of each stored-energy column."""
        return []

    # Constraint generation

    @abstractmethod
    def positive_capacity_constraint(self) -> np.ndarray:
        pass

    @abstractmethod
    def negative_capacity_constraint(self) -> np.ndarray:
        pass

    def capacity_constraints(self) -> List[np.ndarray]:
        """Both capacity rows. Not added automatically; append them to opt in."""
        return [self.positive_capacity_constraint(), self.negative_capacity_constraint()]

    def real_power_constraint(self, setpoint: float) -> np.ndarray:
        """Row pinning the unit's real power to ``setpoint``."""
        c = np.zeros(self.column_size)
        for loc, weight in zip(self.real_power_loc(), self.real_power_weights()):
            c[loc] = weight
        return bound_constraint(c, setpoint, setpoint)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pid={self.pid}, columns={self.column_size})"


class BasicUnit(Unit):
    """
    Four-variable asset.

    Columns: ``[positive power, negative power, capacity, stored energy]``.
    Net power is ``positive - negative``; stored energy is held in energy
    units directly.

    Args:
        pid: Asset identity (generated when None)
        cp: Cost coefficient for real positive power
        cn: Cost coefficient for real negative power
        cc: Cost coefficient for real capacity
        ce: Cost coefficient for stored energy
        xp_ub: Upper bound for positive power
        xn_ub: Upper bound for negative power (positive value)
        xc_ub: Upper bound for capacity
        xe_ub: Upper bound for stored energy

    Raises:
        InvalidCapacityError: If any upper bound is negative
    """

    supports_storage = True

    def __init__(
        self,
        pid: Optional[uuid.UUID] = None,
        cp: float = 0.0,
        cn: float = 0.0,
        cc: float = 0.0,
        ce: float = 0.0,
        xp_ub: float = np.inf,
        xn_ub: float = np.inf,
        xc_ub: float = np.inf,
        xe_ub: float = np.inf,
    ):
        super().__init__(pid)

        upper = [xp_ub, xn_ub, xc_ub, xe_ub]
        if any(ub < 0 for ub in upper):
            raise InvalidCapacityError(f"BasicUnit upper bounds must be non-negative, got {upper}")

        self._coefficients = np.array([cp, cn, cc, ce], dtype=float)
        self._bounds = np.array([[0.0, ub] for ub in upper], dtype=float)
        self._integrality = np.zeros(4, dtype=int)

    def real_positive_power_loc(self) -> List[int]:
        return [0]

    def real_negative_power_loc(self) -> List[int]:
        return [1]

    def real_capacity_loc(self) -> List[int]:
        return [2]

    def real_power_loc(self) -> List[int]:
        return self.real_positive_power_loc() + self.real_negative_power_loc()

    def real_power_weights(self) -> List[float]:
        return [1.0, -1.0]

    def real_positive_capacity_loc(self) -> List[int]:
        return self.real_capacity_loc()

    def real_negative_capacity_loc(self) -> List[int]:
        return self.real_capacity_loc()

    def real_positive_capacity(self) -> List[float]:
        return [1.0]

    def real_negative_capacity(self) -> List[float]:
        return [1.0]

    def stored_energy_loc(self) -> List[int]:
        return [3]

    def stored_energy_capacity(self) -> List[float]:
        return [1.0]

    def positive_capacity_constraint(self) -> np.ndarray:
        """capacity - positive power >= 0"""
        c = np.zeros(self.column_size)
        c[self.real_positive_power_loc()[0]] = -1.0
        c[self.real_capacity_loc()[0]] = 1.0
        return bound_constraint(c, 0.0, np.inf)

    def negative_capacity_constraint(self) -> np.ndarray:
        """capacity - negative power >= 0"""
        c = np.zeros(self.column_size)
        c[self.real_negative_power_loc()[0]] = -1.0
        c[self.real_capacity_loc()[0]] = 1.0
        return bound_constraint(c, 0.0, np.inf)


class PiecewiseUnit(Unit):
    """
    Asset with a piecewise-linear (possibly non-convex) cost curve.

    Layout for ``k`` critical points::

        [flow_0 .. flow_{k-1}, bin_0 .. bin_{k-2}, cap_pos, cap_neg]

    Real power is ``sum(x_i * flow_i)``. The capacity columns are fractions of
    the declared positive/negative capacity and are costed at the capacity
    points' ``cost``.

    Args:
        pid: Asset identity (generated when None)
        critical_points: Cost curve breakpoints; sorted ascending by ``x``
        positive_capacity: Declared positive capacity ``(x, cost)``
        negative_capacity: Declared negative capacity ``(x, cost)``, ``x >= 0``
        flow_upper_bound: Upper bound for the segment-flow columns

    Raises:
        InvalidCapacityError: If a declared capacity is negative
        ValueError: If ``critical_points`` is empty
    """

    def __init__(
        self,
        pid: Optional[uuid.UUID] = None,
        critical_points: Sequence[CriticalPoint] = (),
        positive_capacity: CriticalPoint = CriticalPoint(0.0, 0.0),
        negative_capacity: CriticalPoint = CriticalPoint(0.0, 0.0),
        flow_upper_bound: float = 1.0,
    ):
        super().__init__(pid)

        if positive_capacity.x < 0:
            raise InvalidCapacityError(
                f"Positive capacity must be non-negative, got {positive_capacity.x}"
            )
        if negative_capacity.x < 0:
            raise InvalidCapacityError(
                f"Negative capacity must be non-negative, got {negative_capacity.x}"
            )
        if len(critical_points) == 0:
            raise ValueError("PiecewiseUnit requires at least one critical point")

        self.segment_model = SegmentModel(critical_points, flow_upper_bound=flow_upper_bound)
        self.positive_capacity = positive_capacity
        self.negative_capacity = negative_capacity

        self._coefficients = np.concatenate((
            self.segment_model.cost_coefficients(),
            [positive_capacity.cost, negative_capacity.cost],
        ))
        self._bounds = np.vstack((self.segment_model.bounds(), [[0.0, 1.0], [0.0, 1.0]]))
        self._integrality = np.concatenate((self.segment_model.integrality(), [0, 0]))
        self._constraints = list(self.segment_model.padded_constraints(self.column_size))

    @property
    def critical_points(self) -> List[CriticalPoint]:
        return list(self.segment_model.critical_points)

    def real_power_loc(self) -> List[int]:
        return self.segment_model.flow_loc()

    def real_power_weights(self) -> List[float]:
        return [cp.x for cp in self.segment_model.critical_points]

    def binary_loc(self) -> List[int]:
        return self.segment_model.binary_loc()

    def real_positive_capacity_loc(self) -> List[int]:
        return [self.segment_model.column_size]

    def real_negative_capacity_loc(self) -> List[int]:
        return [self.segment_model.column_size + 1]

    def real_positive_capacity(self) -> List[float]:
        return [self.positive_capacity.x]

    def real_negative_capacity(self) -> List[float]:
        return [self.negative_capacity.x]

    def _power_row(self) -> np.ndarray:
        c = np.zeros(self.column_size)
        for loc, weight in zip(self.real_power_loc(), self.real_power_weights()):
            c[loc] = weight
        return c

    def positive_capacity_constraint(self) -> np.ndarray:
        """sum(x_i * flow_i) - pcap * cap_pos <= 0"""
        c = self._power_row()
        c[self.real_positive_capacity_loc()[0]] = -self.positive_capacity.x
        return bound_constraint(c, -np.inf, 0.0)

    def negative_capacity_constraint(self) -> np.ndarray:
        """sum(x_i * flow_i) + ncap * cap_neg >= 0"""
        c = self._power_row()
        c[self.real_negative_capacity_loc()[0]] = self.negative_capacity.x
        return bound_constraint(c, 0.0, np.inf)


class EnergyStorageUnit(PiecewiseUnit):
    """
    Piecewise unit with a stored-energy column.

    The stored-energy column is the state of charge as a fraction of
    ``energy_capacity`` (bounds ``[0, 1]``, zero cost, continuous). It is
    appended after the capacity columns; rows generated by the segment model
    get a zero coefficient for it.

    Raises:
        InvalidCapacityError: If ``energy_capacity`` is negative
    """

    supports_storage = True

    def __init__(
        self,
        pid: Optional[uuid.UUID] = None,
        critical_points: Sequence[CriticalPoint] = (),
        positive_capacity: CriticalPoint = CriticalPoint(0.0, 0.0),
        negative_capacity: CriticalPoint = CriticalPoint(0.0, 0.0),
        energy_capacity: float = 0.0,
        flow_upper_bound: float = 1.0,
    ):
        if energy_capacity < 0:
            raise InvalidCapacityError(f"Energy capacity must be non-negative, got {energy_capacity}")

        super().__init__(
            pid,
            critical_points,
            positive_capacity,
            negative_capacity,
            flow_upper_bound=flow_upper_bound,
        )
        self.energy_capacity = energy_capacity

        self._coefficients = np.append(self._coefficients, 0.0)
        self._bounds = np.vstack((self._bounds, [[0.0, 1.0]]))
        self._integrality = np.append(self._integrality, 0)
        # insert the new column in front of each row's upper bound
        self._constraints = [
            np.concatenate((row[:-1], [0.0], row[-1:])) for row in self._constraints
        ]

    def stored_energy_loc(self) -> List[int]:
        return [self.segment_model.column_size + 2]

    def stored_energy_capacity(self) -> List[float]:
        return [self.energy_capacity]
