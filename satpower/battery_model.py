"""
satpower/battery_model.py
=========================
Satellite Power Simulation — Time-Stepped Battery Simulator

Integrates battery charge over a fixed timestep grid using the lighting and
net-power functions from :mod:`satpower.power_model`.

Update rule per step k (t_k = k · dt):
    ΔE = P_net(t_k) · dt / 3600                   [Wh]
    E  = min(E + ΔE, E_capacity)     if P_net > 0  (charging, clamped)
    E  = E + ΔE                      otherwise     (discharging, unclamped)

The run stops at the first step whose post-update charge is ≤ 0; that step is
the last recorded sample and the battery is reported as depleted.

Scope:
    - Constant loads, constant solar generation, square-wave lighting.
    - No temperature model, no efficiency losses, no capacity fade.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from satpower import config
from satpower.power_model import (
    SECONDS_PER_HOUR,
    compute_total_power_draw,
    is_sunlit,
    net_power_w,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class InvalidConfig(ValueError):
    """A simulation parameter is out of range.

    Attributes:
        field:  Name of the offending :class:`SimulationConfig` field.
        reason: Human-readable constraint that was violated.
    """

    def __init__(self, field: str, reason: str, value: Any) -> None:
        self.field = field
        self.reason = reason
        self.value = value
        super().__init__(f"{field} {reason}; received {field}={value!r}")


# ---------------------------------------------------------------------------
# Data containers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SimulationConfig:
    """Validated parameter set for one simulation run.

    Attributes:
        duration_s:          Total simulated time span [s].
        step_s:              Fixed timestep [s].
        power_draw_w:        Aggregate subsystem consumption [W].
        solar_power_w:       Solar generation while sunlit [W].
        battery_capacity_wh: Maximum stored energy [Wh].
        initial_charge_wh:   Stored energy at t = 0 [Wh].
        orbit_period_s:      Duration of one sunlight + eclipse cycle [s].
        eclipse_fraction:    Fraction of each orbit spent in eclipse.

    Raises:
        InvalidConfig: If any field violates its constraint. All fields are
                       checked in declaration order; the first failure wins.
    """
    duration_s:          float = config.SIMULATION_TIME_S
    step_s:              float = config.TIME_STEP_S
    power_draw_w:        float = sum(config.SUBSYSTEM_LOADS.values())
    solar_power_w:       float = config.SOLAR_POWER_W
    battery_capacity_wh: float = config.BATTERY_CAPACITY_WH
    initial_charge_wh:   float = config.BATTERY_INITIAL_CHARGE_WH
    orbit_period_s:      float = config.ORBIT_PERIOD_S
    eclipse_fraction:    float = config.ECLIPSE_FRACTION

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise InvalidConfig(f.name, "must be finite", value)

        if not (self.duration_s > 0.0):
            raise InvalidConfig("duration_s", "must be positive", self.duration_s)
        if not (self.step_s > 0.0):
            raise InvalidConfig("step_s", "must be positive", self.step_s)
        if not (self.step_s <= self.duration_s):
            raise InvalidConfig(
                "step_s", f"must not exceed duration_s={self.duration_s!r}", self.step_s
            )
        if not (self.power_draw_w >= 0.0):
            raise InvalidConfig("power_draw_w", "must be non-negative", self.power_draw_w)
        if not (self.solar_power_w >= 0.0):
            raise InvalidConfig("solar_power_w", "must be non-negative", self.solar_power_w)
        if not (self.battery_capacity_wh > 0.0):
            raise InvalidConfig(
                "battery_capacity_wh", "must be positive", self.battery_capacity_wh
            )
        if not (0.0 <= self.initial_charge_wh <= self.battery_capacity_wh):
            raise InvalidConfig(
                "initial_charge_wh",
                f"must be in [0.0, battery_capacity_wh={self.battery_capacity_wh!r}]",
                self.initial_charge_wh,
            )
        if not (self.orbit_period_s > 0.0):
            raise InvalidConfig("orbit_period_s", "must be positive", self.orbit_period_s)
        if not (0.0 <= self.eclipse_fraction <= 1.0):
            raise InvalidConfig(
                "eclipse_fraction", "must be in [0.0, 1.0]", self.eclipse_fraction
            )

    @classmethod
    def from_subsystem_loads(
        cls,
        loads: Mapping[str, float],
        **kwargs: float,
    ) -> SimulationConfig:
        """Build a config whose power draw is the sum of named subsystem loads.

        Args:
            loads:    Mapping of subsystem name to consumption [W].
            **kwargs: Any other :class:`SimulationConfig` field.

        Raises:
            InvalidConfig: If a load is negative or another field is invalid.
        """
        try:
            power_draw_w = compute_total_power_draw(loads)
        except ValueError as exc:
            raise InvalidConfig("power_draw_w", "must be a sum of non-negative loads",
                                dict(loads)) from exc
        return cls(power_draw_w=power_draw_w, **kwargs)

    @property
    def num_steps(self) -> int:
        """Number of timesteps on the grid, inclusive of t = 0."""
        return math.floor(self.duration_s / self.step_s) + 1


def default_config() -> SimulationConfig:
    """Return the one-day scenario built from :mod:`satpower.config`."""
    return SimulationConfig.from_subsystem_loads(
        config.SUBSYSTEM_LOADS,
        duration_s=config.SIMULATION_TIME_S,
        step_s=config.TIME_STEP_S,
        solar_power_w=config.SOLAR_POWER_W,
        battery_capacity_wh=config.BATTERY_CAPACITY_WH,
        initial_charge_wh=config.BATTERY_INITIAL_CHARGE_WH,
        orbit_period_s=config.ORBIT_PERIOD_S,
        eclipse_fraction=config.ECLIPSE_FRACTION,
    )


@dataclass(frozen=True)
class SimulationResult:
    """Complete, immutable output of one simulation run.

    Attributes:
        config:        Parameter set that produced this result.
        timestamps_s:  Time of each recorded step [s], starting at 0.
        charge_wh:     Battery charge after each step's update [Wh].
                       Same length and index correspondence as
                       ``timestamps_s``. May be ≤ 0 only at the last
                       index, and only when ``depleted`` is True.
        depleted:      True if the run stopped on battery depletion.
        depleted_at_s: Time of the depleting step [s], or None.
    """
    config:        SimulationConfig
    timestamps_s:  tuple[float, ...]
    charge_wh:     tuple[float, ...]
    depleted:      bool = False
    depleted_at_s: float | None = None

    def __post_init__(self) -> None:
        if not self.timestamps_s:
            raise ValueError("Result must hold at least one sample; received no timestamps")
        if len(self.timestamps_s) != len(self.charge_wh):
            raise ValueError(
                f"timestamps_s and charge_wh must have equal length; received "
                f"{len(self.timestamps_s)} timestamps and {len(self.charge_wh)} charges"
            )

    @property
    def num_steps(self) -> int:
        return len(self.timestamps_s)

    @property
    def time_h(self) -> list[float]:
        """Recorded timestamps converted to hours."""
        return [t / SECONDS_PER_HOUR for t in self.timestamps_s]

    @property
    def soc(self) -> list[float]:
        """Recorded charge as a fraction of battery capacity."""
        capacity = self.config.battery_capacity_wh
        return [e / capacity for e in self.charge_wh]

    @property
    def final_charge_wh(self) -> float:
        return self.charge_wh[-1]

    @property
    def min_charge_wh(self) -> float:
        return min(self.charge_wh)

    @property
    def depleted_at_h(self) -> float | None:
        if self.depleted_at_s is None:
            return None
        return self.depleted_at_s / SECONDS_PER_HOUR


# ---------------------------------------------------------------------------
# Battery simulator
# ---------------------------------------------------------------------------

class BatterySimulator:
    """Time-stepped battery charge simulator.

    Owns the charge state machine for a single run:

        Charging     — P_net > 0, charge clamped at capacity
        Discharging  — P_net ≤ 0, charge not clamped at zero
        Depleted     — charge ≤ 0 after an update; absorbing, run stops

    Each call to :meth:`run` starts from ``initial_charge_wh`` and shares no
    state with previous calls, so repeated runs return identical results.

    Args:
        config: Validated :class:`SimulationConfig`.

    Example:
        >>> result = BatterySimulator(default_config()).run()
        >>> result.timestamps_s[:3]
        (0.0, 60.0, 120.0)
    """

    def __init__(self, config: SimulationConfig) -> None:
        self._config: SimulationConfig = config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> SimulationResult:
        """Advance the battery over the full timestep grid.

        Returns:
            :class:`SimulationResult` with one sample per completed step,
            including t = 0, truncated at the depleting step if any.
        """
        cfg = self._config
        timestamps: list[float] = []
        charges: list[float] = []
        charge_wh: float = cfg.initial_charge_wh
        depleted_at_s: float | None = None

        for k in range(cfg.num_steps):
            t_s = k * cfg.step_s
            charge_wh = self._step(charge_wh, t_s)

            timestamps.append(t_s)
            charges.append(charge_wh)

            if charge_wh <= 0.0:
                depleted_at_s = t_s
                break

        result = SimulationResult(
            config=cfg,
            timestamps_s=tuple(timestamps),
            charge_wh=tuple(charges),
            depleted=depleted_at_s is not None,
            depleted_at_s=depleted_at_s,
        )
        if result.depleted:
            logger.info(
                "Battery depleted at t=%.1f s after %d steps",
                depleted_at_s, result.num_steps,
            )
        else:
            logger.debug(
                "Simulation completed %d steps; final charge %.3f Wh",
                result.num_steps, result.final_charge_wh,
            )
        return result

    @property
    def config(self) -> SimulationConfig:
        return self._config

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _step(self, charge_wh: float, t_s: float) -> float:
        """Apply one timestep's energy delta and return the new charge."""
        cfg = self._config
        sunlit = is_sunlit(t_s, cfg.orbit_period_s, cfg.eclipse_fraction)
        p_net = net_power_w(sunlit, cfg.solar_power_w, cfg.power_draw_w)
        delta_wh = p_net * cfg.step_s / SECONDS_PER_HOUR

        if p_net > 0.0:
            # Excess generation beyond capacity is shed, not stored
            return min(charge_wh + delta_wh, cfg.battery_capacity_wh)
        return charge_wh + delta_wh


def run(config: SimulationConfig) -> SimulationResult:
    """Run one simulation for ``config``. See :meth:`BatterySimulator.run`."""
    return BatterySimulator(config).run()
