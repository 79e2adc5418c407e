"""
tests/test_battery_model.py
===========================
Satellite Power Simulation — Unit Tests for the Battery Simulator

Covers config validation, the clamped-charge / unclamped-discharge update
rule, depletion termination and the structural invariants of the result.
"""

import math

import pytest

from satpower.battery_model import (
    BatterySimulator,
    InvalidConfig,
    SimulationConfig,
    SimulationResult,
    default_config,
    run,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def default_result():
    return run(default_config())


def make_config(**overrides):
    """Short one-orbit config with no load and no generation unless overridden."""
    params = dict(
        duration_s=6000.0,
        step_s=60.0,
        power_draw_w=0.0,
        solar_power_w=0.0,
        battery_capacity_wh=500.0,
        initial_charge_wh=500.0,
        orbit_period_s=6000.0,
        eclipse_fraction=0.4,
    )
    params.update(overrides)
    return SimulationConfig(**params)


# ---------------------------------------------------------------------------
# SimulationConfig
# ---------------------------------------------------------------------------

class TestSimulationConfig:

    def test_default_config_values(self):
        cfg = default_config()
        assert cfg.duration_s == 86400.0
        assert cfg.step_s == 60.0
        assert cfg.power_draw_w == pytest.approx(110.0)
        assert cfg.solar_power_w == 100.0
        assert cfg.battery_capacity_wh == 500.0
        assert cfg.initial_charge_wh == 500.0
        assert cfg.orbit_period_s == 6000.0
        assert cfg.eclipse_fraction == 0.4

    def test_default_config_equals_dataclass_defaults(self):
        assert default_config() == SimulationConfig()

    def test_config_is_immutable(self):
        cfg = default_config()
        with pytest.raises(AttributeError):
            cfg.step_s = 1.0

    def test_num_steps_inclusive_of_start(self):
        assert default_config().num_steps == 1441

    def test_num_steps_drops_partial_final_step(self):
        assert make_config(duration_s=100.0, step_s=30.0).num_steps == 4

    def test_from_subsystem_loads_sums_draw(self):
        cfg = SimulationConfig.from_subsystem_loads({"payload": 50.0, "aocs": 20.0})
        assert cfg.power_draw_w == pytest.approx(70.0)

    def test_from_subsystem_loads_rejects_negative_load(self):
        with pytest.raises(InvalidConfig) as excinfo:
            SimulationConfig.from_subsystem_loads({"payload": -5.0})
        assert excinfo.value.field == "power_draw_w"

    def test_invalid_config_is_value_error(self):
        with pytest.raises(ValueError):
            make_config(step_s=0.0)


class TestSimulationConfigGuards:
    """Each out-of-range field raises InvalidConfig naming that field."""

    @pytest.mark.parametrize(
        "overrides, field_name",
        [
            ({"duration_s": 0.0}, "duration_s"),
            ({"duration_s": -1.0}, "duration_s"),
            ({"step_s": 0.0}, "step_s"),
            ({"step_s": -60.0}, "step_s"),
            ({"step_s": 7000.0}, "step_s"),
            ({"power_draw_w": -0.1}, "power_draw_w"),
            ({"solar_power_w": -100.0}, "solar_power_w"),
            ({"battery_capacity_wh": 0.0}, "battery_capacity_wh"),
            ({"initial_charge_wh": -1.0}, "initial_charge_wh"),
            ({"initial_charge_wh": 500.1}, "initial_charge_wh"),
            ({"orbit_period_s": 0.0}, "orbit_period_s"),
            ({"eclipse_fraction": -0.01}, "eclipse_fraction"),
            ({"eclipse_fraction": 1.01}, "eclipse_fraction"),
            ({"eclipse_fraction": math.nan}, "eclipse_fraction"),
            ({"duration_s": math.nan}, "duration_s"),
            ({"duration_s": math.inf}, "duration_s"),
            ({"step_s": math.inf}, "step_s"),
            ({"power_draw_w": math.inf}, "power_draw_w"),
            ({"solar_power_w": math.inf}, "solar_power_w"),
            ({"battery_capacity_wh": math.inf}, "battery_capacity_wh"),
            ({"initial_charge_wh": -math.inf}, "initial_charge_wh"),
            ({"orbit_period_s": math.inf}, "orbit_period_s"),
            ({"eclipse_fraction": -math.inf}, "eclipse_fraction"),
        ],
    )
    def test_out_of_range_field_raises(self, overrides, field_name):
        with pytest.raises(InvalidConfig, match=field_name) as excinfo:
            make_config(**overrides)
        assert excinfo.value.field == field_name

    def test_message_includes_received_value(self):
        with pytest.raises(InvalidConfig, match=r"received step_s=-60\.0"):
            make_config(step_s=-60.0)

    def test_boundary_values_accepted(self):
        make_config(step_s=6000.0, duration_s=6000.0)
        make_config(initial_charge_wh=0.0)
        make_config(initial_charge_wh=500.0)
        make_config(eclipse_fraction=0.0)
        make_config(eclipse_fraction=1.0)


# ---------------------------------------------------------------------------
# Result invariants (default one-day scenario)
# ---------------------------------------------------------------------------

class TestResultInvariants:

    def test_sequences_have_equal_length(self, default_result):
        assert len(default_result.timestamps_s) == len(default_result.charge_wh)

    def test_timestamps_start_at_zero_and_increase(self, default_result):
        ts = default_result.timestamps_s
        assert ts[0] == 0.0
        assert all(b > a for a, b in zip(ts, ts[1:]))

    def test_timestamps_are_multiples_of_step(self, default_result):
        assert default_result.timestamps_s[:3] == (0.0, 60.0, 120.0)
        assert all(t == k * 60.0 for k, t in enumerate(default_result.timestamps_s))

    def test_charge_never_exceeds_capacity(self):
        """A one-day surplus run hits the ceiling every sunlit pass."""
        cfg = SimulationConfig(solar_power_w=300.0, eclipse_fraction=0.4)
        result = run(cfg)
        assert result.depleted is False
        assert max(result.charge_wh) <= cfg.battery_capacity_wh
        assert result.charge_wh.count(cfg.battery_capacity_wh) > 14

    def test_step_count_bounded(self, default_result):
        cfg = default_result.config
        assert default_result.num_steps <= math.ceil(cfg.duration_s / cfg.step_s) + 1

    def test_result_is_immutable(self, default_result):
        assert isinstance(default_result.charge_wh, tuple)
        with pytest.raises(AttributeError):
            default_result.depleted = False

    def test_result_keeps_config(self, default_result):
        assert default_result.config == default_config()

    def test_repeated_runs_are_identical(self):
        cfg = default_config()
        simulator = BatterySimulator(cfg)
        assert simulator.run() == simulator.run() == run(cfg)

    def test_default_scenario_depletes(self, default_result):
        """A −83 Wh per-orbit deficit drains 500 Wh well within a day."""
        assert default_result.depleted is True
        assert default_result.charge_wh[-1] <= 0.0
        assert default_result.depleted_at_s == default_result.timestamps_s[-1]
        assert all(e > 0.0 for e in default_result.charge_wh[:-1])
        assert default_result.depleted_at_s < 86400.0

    def test_default_scenario_first_step(self, default_result):
        """Sunlit at t=0: −10 W for 60 s = −1/6 Wh."""
        assert default_result.charge_wh[0] == pytest.approx(500.0 - 10.0 * 60.0 / 3600.0)

    def test_eclipse_discharge_rate(self, default_result):
        """Eclipse step at t=3600 s: −110 W for 60 s."""
        idx = default_result.timestamps_s.index(3600.0)
        delta = default_result.charge_wh[idx] - default_result.charge_wh[idx - 1]
        assert delta == pytest.approx(-110.0 * 60.0 / 3600.0)


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

class TestScenarios:

    @pytest.mark.parametrize("eclipse_fraction", [0.0, 0.4, 1.0])
    def test_no_load_no_solar_holds_charge(self, eclipse_fraction):
        cfg = make_config(initial_charge_wh=321.0, eclipse_fraction=eclipse_fraction)
        result = run(cfg)
        assert result.num_steps == cfg.num_steps
        assert all(e == 321.0 for e in result.charge_wh)
        assert result.depleted is False
        assert result.depleted_at_s is None

    def test_single_step_depletion(self):
        """100 Wh drained by 100 W in one hour-long step stops the run."""
        cfg = make_config(
            duration_s=86400.0, step_s=3600.0, power_draw_w=100.0,
            solar_power_w=0.0, initial_charge_wh=100.0,
        )
        result = run(cfg)
        assert result.num_steps == 1
        assert result.charge_wh == (0.0,)
        assert result.depleted is True
        assert result.depleted_at_s == result.timestamps_s[-1] == 0.0

    def test_always_sunlit_deficit_is_not_clamped_upward(self):
        cfg = make_config(
            duration_s=3600.0, step_s=60.0, eclipse_fraction=0.0,
            solar_power_w=100.0, power_draw_w=110.0,
        )
        result = run(cfg)
        step_wh = 10.0 * 60.0 / 3600.0
        assert result.depleted is False
        assert result.num_steps == 61
        for k, e in enumerate(result.charge_wh):
            assert e == pytest.approx(500.0 - (k + 1) * step_wh)
        assert all(b < a for a, b in zip(result.charge_wh, result.charge_wh[1:]))

    def test_charging_clamps_at_capacity(self):
        cfg = make_config(
            duration_s=3600.0, step_s=3600.0, eclipse_fraction=0.0,
            solar_power_w=150.0, power_draw_w=110.0, initial_charge_wh=495.0,
        )
        result = run(cfg)
        assert result.charge_wh[0] == 500.0

    def test_charging_below_capacity_is_not_clamped(self):
        cfg = make_config(
            duration_s=3600.0, step_s=3600.0, eclipse_fraction=0.0,
            solar_power_w=150.0, power_draw_w=110.0, initial_charge_wh=400.0,
        )
        assert run(cfg).charge_wh[0] == pytest.approx(440.0)

    def test_discharge_overshoots_below_zero(self):
        """Discharge is not floored at zero before the depletion check."""
        cfg = make_config(
            duration_s=7200.0, step_s=3600.0, power_draw_w=100.0,
            initial_charge_wh=30.0,
        )
        result = run(cfg)
        assert result.charge_wh == (pytest.approx(-70.0),)
        assert result.depleted is True

    def test_depletion_stops_recording(self):
        cfg = make_config(
            duration_s=86400.0, step_s=60.0, eclipse_fraction=1.0,
            power_draw_w=60.0, initial_charge_wh=10.0,
        )
        result = run(cfg)
        # 1 Wh per step → empty after 10 steps (t = 540 s)
        assert result.num_steps == 10
        assert result.depleted_at_s == 540.0
        assert result.final_charge_wh == pytest.approx(0.0, abs=1e-9)

    def test_empty_battery_with_net_charge_recovers(self):
        cfg = make_config(
            duration_s=600.0, step_s=60.0, eclipse_fraction=0.0,
            solar_power_w=60.0, power_draw_w=0.0, initial_charge_wh=0.0,
        )
        result = run(cfg)
        assert result.depleted is False
        assert result.charge_wh[0] == pytest.approx(1.0)

    def test_break_even_starting_empty_is_depleted(self):
        cfg = make_config(initial_charge_wh=0.0)
        result = run(cfg)
        assert result.num_steps == 1
        assert result.depleted_at_s == 0.0

    def test_eclipse_boundary_at_3600s(self, default_result):
        ts = default_result.timestamps_s
        charges = default_result.charge_wh
        i = ts.index(3540.0)
        sunlit_delta = charges[i] - charges[i - 1]
        eclipse_delta = charges[i + 1] - charges[i]
        assert sunlit_delta == pytest.approx(-10.0 / 60.0)
        assert eclipse_delta == pytest.approx(-110.0 / 60.0)


# ---------------------------------------------------------------------------
# Derived result properties
# ---------------------------------------------------------------------------

class TestResultProperties:

    def test_time_in_hours(self, default_result):
        assert default_result.time_h[60] == pytest.approx(1.0)

    def test_soc_fraction(self):
        result = run(make_config(initial_charge_wh=250.0))
        assert result.soc[0] == pytest.approx(0.5)

    def test_min_and_final_charge(self, default_result):
        assert default_result.min_charge_wh == default_result.final_charge_wh

    def test_depleted_at_hours(self, default_result):
        assert default_result.depleted_at_h == pytest.approx(default_result.depleted_at_s / 3600.0)

    def test_depleted_at_hours_none_when_not_depleted(self):
        result = run(make_config())
        assert result.depleted_at_h is None

    def test_result_can_be_built_directly(self):
        cfg = make_config()
        result = SimulationResult(config=cfg, timestamps_s=(0.0,), charge_wh=(500.0,))
        assert result.num_steps == 1
        assert result.depleted is False

    def test_infinite_duration_reports_finite_constraint(self):
        with pytest.raises(InvalidConfig, match="duration_s must be finite"):
            make_config(duration_s=math.inf)

    def test_empty_result_rejected(self):
        with pytest.raises(ValueError, match="at least one sample"):
            SimulationResult(config=make_config(), timestamps_s=(), charge_wh=())

    def test_mismatched_result_lengths_rejected(self):
        with pytest.raises(ValueError, match="equal length"):
            SimulationResult(config=make_config(), timestamps_s=(0.0, 60.0), charge_wh=(500.0,))
