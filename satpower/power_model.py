"""
satpower/power_model.py
=======================
Satellite Power Simulation — Power/Orbit Model

Pure functions that classify a point in time as sunlight or eclipse and
turn the lighting state into net power flowing into the battery.

Lighting model:
    phase   = t mod T_orbit
    sunlit  ⇔ phase < (1 − f_eclipse) · T_orbit

The sunlight interval is the first (1 − f_eclipse) portion of every orbit,
the eclipse interval is the remaining tail.

Rules:
    - Every function is a pure, deterministic mapping.
    - No simulation loop, no I/O, no side effects.
"""

from __future__ import annotations

from collections.abc import Mapping


SECONDS_PER_HOUR: float = 3600.0


# ---------------------------------------------------------------------------
# Subsystem loads
# ---------------------------------------------------------------------------

def compute_total_power_draw(loads: Mapping[str, float]) -> float:
    """Sum named subsystem loads into the aggregate power draw.

    Equation:
        P_draw = Σ P_i

    Args:
        loads: Mapping of subsystem name to constant consumption [W].

    Returns:
        Total power consumption [W].

    Raises:
        ValueError: If any individual load is negative.

    Example:
        >>> compute_total_power_draw({"payload": 50.0, "comms": 30.0})
        80.0
    """
    for name, power_w in loads.items():
        if not (power_w >= 0.0):
            raise ValueError(
                f"Subsystem load must be non-negative; received {name}={power_w!r}"
            )
    return float(sum(loads.values()))


# ---------------------------------------------------------------------------
# Orbit lighting
# ---------------------------------------------------------------------------

def is_sunlit(t_s: float, orbit_period_s: float, eclipse_fraction: float) -> bool:
    """Return True if the satellite is illuminated at time ``t_s``.

    The test is half-open: the boundary instant
    ``(1 − eclipse_fraction) · orbit_period_s`` already belongs to eclipse.

    Args:
        t_s:              Simulation time [s].
        orbit_period_s:   Duration of one sunlight + eclipse cycle [s].
        eclipse_fraction: Fraction of the period spent in eclipse [0.0, 1.0].

    Example:
        >>> is_sunlit(3599.0, 6000.0, 0.4)
        True
        >>> is_sunlit(3600.0, 6000.0, 0.4)
        False
    """
    phase = t_s % orbit_period_s
    return phase < (1.0 - eclipse_fraction) * orbit_period_s


def compute_orbit_durations(orbit_period_s: float, eclipse_fraction: float) -> dict[str, float]:
    """Split one orbit into its sunlit and eclipse durations.

    Returns:
        Dictionary with keys ``sunlit_s`` and ``eclipse_s`` [s].

    Raises:
        ValueError: If ``orbit_period_s`` ≤ 0 or ``eclipse_fraction`` is
                    outside [0.0, 1.0].
    """
    if not (orbit_period_s > 0.0):
        raise ValueError(
            f"Orbit period must be positive; received orbit_period_s={orbit_period_s!r}"
        )
    if not (0.0 <= eclipse_fraction <= 1.0):
        raise ValueError(
            f"Eclipse fraction must be in [0.0, 1.0]; "
            f"received eclipse_fraction={eclipse_fraction!r}"
        )
    eclipse_s = orbit_period_s * eclipse_fraction
    return {
        "sunlit_s": orbit_period_s - eclipse_s,
        "eclipse_s": eclipse_s,
    }


# ---------------------------------------------------------------------------
# Power balance
# ---------------------------------------------------------------------------

def net_power_w(sunlit: bool, solar_power_w: float, power_draw_w: float) -> float:
    """Compute instantaneous net power into the battery.

    Equation:
        P_net = P_solar − P_draw    (sunlight)
        P_net = −P_draw             (eclipse)

    Positive → battery charges; zero/negative → battery discharges.
    """
    if sunlit:
        return solar_power_w - power_draw_w
    return -power_draw_w


def compute_orbit_energy_balance(
    orbit_period_s: float,
    eclipse_fraction: float,
    solar_power_w: float,
    power_draw_w: float,
) -> dict[str, float | bool]:
    """Compute the analytical energy balance over one full orbit.

    Ignores the battery capacity ceiling, so a positive ``net_wh`` means the
    array can sustain the load on average, not that no energy is shed.

    Equations:
        E_gen  = P_solar · t_sunlit / 3600
        E_cons = P_draw  · T_orbit  / 3600
        E_net  = E_gen − E_cons

    Returns:
        Dictionary with keys:
            ``generated_wh`` — float: solar energy collected per orbit [Wh].
            ``consumed_wh``  — float: load energy per orbit [Wh].
            ``net_wh``       — float: net battery energy change per orbit [Wh].
            ``sustainable``  — bool: True if ``net_wh`` ≥ 0.

    Example:
        >>> compute_orbit_energy_balance(6000.0, 0.4, 100.0, 110.0)["net_wh"]
        -83.33...
    """
    durations = compute_orbit_durations(orbit_period_s, eclipse_fraction)
    generated_wh = solar_power_w * durations["sunlit_s"] / SECONDS_PER_HOUR
    consumed_wh = power_draw_w * orbit_period_s / SECONDS_PER_HOUR
    net_wh = generated_wh - consumed_wh
    return {
        "generated_wh": generated_wh,
        "consumed_wh": consumed_wh,
        "net_wh": net_wh,
        "sustainable": net_wh >= 0.0,
    }
