"""
Tests for Series - time stages and state of charge
"""

import uuid

import pytest
import numpy as np

from dispatchlp.exceptions import ConstraintDimensionError
from dispatchlp.formulation import (
    BasicUnit,
    Cluster,
    CriticalPoint,
    EnergyStorageUnit,
    Group,
    PiecewiseUnit,
    Series,
)


class TestSeriesComposition:

    def test_column_size_is_additive(self, basic_battery):
        """Series width is the sum of its stages' widths."""
        stage = Group(basic_battery)
        series = Series(stage, stage, stage, stage)

        assert series.column_size == 16
        assert len(series.stages) == 4

    def test_reused_stage_is_independent(self, basic_battery):
        """The same group may be passed as every stage."""
        stage = Group(basic_battery)
        stage.new_constraint(stage.net_load_constraint(10))
        series = Series(stage, stage)
        stage.new_constraint(stage.net_load_constraint(5))

        rows = series.constraints()
        assert rows.shape == (2, 10)
        np.testing.assert_array_equal(rows[0], [10, 1, -1, 0, 0, 0, 0, 0, 0, 10])
        np.testing.assert_array_equal(rows[1], [10, 0, 0, 0, 0, 1, -1, 0, 0, 10])

    def test_cluster_stages(self, basic_battery):
        """Clusters can be used as stages."""
        cluster = Cluster(Group(basic_battery), Group(BasicUnit()))
        series = Series(cluster, cluster)

        assert series.column_size == 16
        assert series.stored_energy_pid_loc(basic_battery.pid) == [3, 11]

    def test_pid_queries_across_stages(self, basic_battery, battery_pid):
        """Power and energy columns are reported for every stage."""
        stage = Group(basic_battery)
        series = Series(stage, stage, stage, stage)

        assert series.real_power_pid_loc(battery_pid) == [0, 1, 4, 5, 8, 9, 12, 13]
        assert series.stored_energy_pid_loc(battery_pid) == [3, 7, 11, 15]

    def test_stage_units_are_snapshots(self):
        """Appending through a stage's unit after building leaves the series unchanged."""
        stage = Group(BasicUnit())
        series = Series(stage, stage)

        unit = stage.units[0]
        unit.new_constraint(unit.real_power_constraint(1.0))

        assert series.constraints().shape == (0, 10)

    def test_stages_do_not_share_units(self):
        """A stage reused twice gets independent units in each position."""
        series = Series(*[Group(BasicUnit())] * 2)

        unit = series.stages[0].units[0]
        unit.new_constraint(unit.real_power_constraint(1.0))

        rows = series.constraints()
        assert rows.shape == (1, 10)
        np.testing.assert_array_equal(rows[0], [1, 1, -1, 0, 0, 0, 0, 0, 0, 1])

    def test_copy_is_independent(self):
        """Appending inside a copied series leaves the original unchanged."""
        series = Series(Group(BasicUnit()))
        other = series.copy()

        unit = other.stages[0].units[0]
        unit.new_constraint(unit.real_power_constraint(1.0))

        assert other.constraints().shape == (1, 6)
        assert series.constraints().shape == (0, 6)

    def test_bad_row_rejected_without_mutation(self, basic_battery, battery_pid):
        """A batch holding one short row leaves the series' rows unchanged."""
        stage = Group(basic_battery)
        series = Series(stage, stage)
        good = series.battery_initial_energy_constraint(battery_pid, 5)

        with pytest.raises(ConstraintDimensionError):
            series.new_constraint(good, np.zeros(3))

        assert series.constraints().shape == (0, 10)


class TestBatteryInitialEnergy:

    def test_basic_unit(self, basic_battery, battery_pid):
        """Energy column of stage 0 pinned to the initial energy."""
        stage = Group(basic_battery)
        series = Series(stage, stage)

        row = series.battery_initial_energy_constraint(battery_pid, 20)
        expected = np.zeros(10)
        expected[[0, 4, 9]] = [20, 1, 20]
        np.testing.assert_array_equal(row, expected)

    def test_storage_unit_scaled_by_capacity(self, three_point_curve, battery_pid):
        """Storage units are pinned in energy units, not fractions."""
        ess = EnergyStorageUnit(battery_pid, three_point_curve, energy_capacity=100)
        series = Series(Group(ess), Group(ess))

        row = series.battery_initial_energy_constraint(battery_pid, 50)
        assert row[1 + 7] == 100
        assert row[0] == row[-1] == 50

    def test_empty_series_rejected(self, battery_pid):
        """An empty series has no stage to pin."""
        with pytest.raises(ValueError):
            Series().battery_initial_energy_constraint(battery_pid, 0)

    def test_only_first_stage_required(self, basic_battery, battery_pid):
        """Later stages without the unit do not block the initial energy row."""
        series = Series(Group(basic_battery), Group(BasicUnit()))

        row = series.battery_initial_energy_constraint(battery_pid, 20)
        assert row[1 + 3] == 1
        assert row[0] == row[-1] == 20

    def test_first_stage_without_unit_rejected(self, basic_battery, battery_pid):
        """The unit must have storage in stage 0."""
        series = Series(Group(BasicUnit()), Group(basic_battery))

        with pytest.raises(ValueError, match="Stage 0"):
            series.battery_initial_energy_constraint(battery_pid, 20)


class TestBatteryEnergyConstraints:

    def test_basic_unit_recursion(self, basic_battery, battery_pid):
        """e_i - dt * (p_i - n_i) - e_{i+1} = 0"""
        stage = Group(basic_battery)
        series = Series(stage, stage, stage, stage)

        rows = series.battery_energy_constraints(battery_pid, 0.5)
        assert len(rows) == 3

        for i, row in enumerate(rows):
            expected = np.zeros(16)
            expected[4 * i] = -0.5
            expected[4 * i + 1] = 0.5
            expected[4 * i + 3] = 1
            expected[4 * (i + 1) + 3] = -1
            np.testing.assert_array_equal(row[1:-1], expected)
            assert row[0] == row[-1] == 0

    def test_storage_unit_recursion(self, three_point_curve, battery_pid):
        """Coefficients scale with the energy capacity and critical points."""
        ess = EnergyStorageUnit(
            battery_pid,
            three_point_curve,
            positive_capacity=CriticalPoint(10, 0),
            negative_capacity=CriticalPoint(10, 0),
            energy_capacity=100,
        )
        stage = Group(ess)
        series = Series(stage, stage)

        (row,) = series.battery_energy_constraints(battery_pid, 1.0)

        expected = np.zeros(18)
        expected[[1, 2, 3]] = [10, 0, -10]  # -dt * weight at the flows
        expected[1 + 7] = 100
        expected[1 + 8 + 7] = -100
        np.testing.assert_array_equal(row, expected)

    def test_single_stage_has_no_rows(self, basic_battery, battery_pid):
        """One stage has no transition."""
        assert Series(Group(basic_battery)).battery_energy_constraints(battery_pid, 1.0) == []

    def test_stage_without_unit_rejected(self, basic_battery, battery_pid):
        """Every stage must hold the unit."""
        series = Series(Group(basic_battery), Group(BasicUnit()))

        with pytest.raises(ValueError, match="Stage 1"):
            series.battery_energy_constraints(battery_pid, 1.0)

    def test_stage_without_storage_rejected(self, three_point_curve):
        """Units without storage cannot carry state."""
        pid = uuid.uuid4()
        piecewise = PiecewiseUnit(pid, three_point_curve)
        series = Series(Group(piecewise), Group(piecewise))

        with pytest.raises(ValueError):
            series.battery_energy_constraints(pid, 1.0)

    def test_first_appearance_carries_state(self, basic_battery, battery_pid):
        """Only the first appearance in a stage holds the energy."""
        stage = Group(basic_battery, basic_battery)
        series = Series(stage, stage)

        (row,) = series.battery_energy_constraints(battery_pid, 1.0)
        assert row[1 + 3] == 1
        assert row[1 + 7] == 0
        assert row[1 + 8 + 3] == -1

    def test_per_stage_parameters(self, three_point_curve, battery_pid):
        """Energy capacity is read from each stage."""
        small = EnergyStorageUnit(battery_pid, three_point_curve, energy_capacity=50)
        large = EnergyStorageUnit(battery_pid, three_point_curve, energy_capacity=80)
        series = Series(Group(small), Group(large))

        (row,) = series.battery_energy_constraints(battery_pid, 1.0)
        assert row[1 + 7] == 50
        assert row[1 + 8 + 7] == -80

        with pytest.raises(ValueError):
            series.battery_energy_constraints(battery_pid, 1.0, require_uniform=True)

    def test_uniform_stages_pass_check(self, basic_battery, battery_pid):
        """Identical stages pass the uniformity check."""
        stage = Group(basic_battery)
        series = Series(stage, stage, stage)

        rows = series.battery_energy_constraints(battery_pid, 1.0, require_uniform=True)
        assert len(rows) == 2
