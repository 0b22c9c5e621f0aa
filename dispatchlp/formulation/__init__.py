"""
Composable LP/MIP formulation of dispatchable power and energy assets.

Units compose into groups (one bus), groups into clusters (linked buses) and
groups or clusters into a series (time stages). Every level exposes the same
contract: cost coefficients, column bounds, constraint rows and an
integrality mask over one globally consistent column space.

Usage:
    >>> from dispatchlp.formulation import BasicUnit, Group, Series
    >>>
    >>> battery = BasicUnit(cp=0.1, cn=0.1, xp_ub=10, xn_ub=10, xe_ub=20)
    >>> stage = Group(battery)
    >>> stage.new_constraint(stage.net_load_constraint(10))
    >>>
    >>> series = Series(stage, stage, stage)
    >>> series.new_constraint(series.battery_initial_energy_constraint(battery.pid, 20))
    >>> series.new_constraint(*series.battery_energy_constraints(battery.pid, dt=0.5))
"""

from .cluster import Cluster
from .columns import ColumnAllocator, ColumnRange, project_row
from .composite import Composite
from .constraint import (
    ConstraintStore,
    bound_constraint,
    coefficients,
    lower_bound,
    stack_rows,
    upper_bound,
)
from .contract import LinearProgram, MipLinearProgram, Placement, Sequencer
from .critical_point import CriticalPoint
from .group import Group
from .segment_model import SegmentModel
from .series import Series
from .unit import BasicUnit, EnergyStorageUnit, PiecewiseUnit, Unit

__all__ = [
    "BasicUnit",
    "Cluster",
    "ColumnAllocator",
    "ColumnRange",
    "Composite",
    "ConstraintStore",
    "CriticalPoint",
    "EnergyStorageUnit",
    "Group",
    "LinearProgram",
    "MipLinearProgram",
    "PiecewiseUnit",
    "Placement",
    "SegmentModel",
    "Sequencer",
    "Series",
    "Unit",
    "bound_constraint",
    "coefficients",
    "lower_bound",
    "project_row",
    "stack_rows",
    "upper_bound",
]
