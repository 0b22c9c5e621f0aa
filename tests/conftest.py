"""
Shared fixtures for dispatchlp tests.
"""

import uuid

import pytest

from dispatchlp.formulation import BasicUnit, CriticalPoint


@pytest.fixture
def three_point_curve():
    """Symmetric curve from -10 to 10 with a kink at zero."""
    return [CriticalPoint(-10, -1), CriticalPoint(0, 0), CriticalPoint(10, 1)]


@pytest.fixture
def battery_pid():
    return uuid.uuid4()


@pytest.fixture
def basic_battery(battery_pid):
    """Basic unit with 10 units of power, 10 of capacity and 20 of energy."""
    return BasicUnit(battery_pid, 0.1, 0.1, 0.01, 0.0, 10, 10, 10, 20)
