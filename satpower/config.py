"""
satpower/config.py
==================
Satellite Power Simulation — System Constants

Default engineering values for a one-day battery energy balance run of a
small satellite with four always-on subsystems and a fixed-period
sunlight/eclipse cycle.

Rules:
    - No calculations or derived quantities here.
    - Power in Watts [W], energy in watt-hours [Wh], time in seconds [s].
    - No simulation logic or conditional expressions.
"""


# ---------------------------------------------------------------------------
# Simulation window
# ---------------------------------------------------------------------------

SIMULATION_TIME_S: float = 86400.0   # 24 hours
TIME_STEP_S: float = 60.0            # 1 minute


# ---------------------------------------------------------------------------
# Subsystem power consumption (all subsystems assumed continuously active)
# ---------------------------------------------------------------------------

PAYLOAD_POWER_W: float = 50.0    # Payload
COMMS_POWER_W:   float = 30.0    # Communication (radios)
OBC_POWER_W:     float = 10.0    # On-board computer
AOCS_POWER_W:    float = 20.0    # Attitude & orbit control system

SUBSYSTEM_LOADS: dict[str, float] = {
    "payload": PAYLOAD_POWER_W,
    "comms":   COMMS_POWER_W,
    "obc":     OBC_POWER_W,
    "aocs":    AOCS_POWER_W,
}


# ---------------------------------------------------------------------------
# Solar array
# ---------------------------------------------------------------------------

SOLAR_POWER_W: float = 100.0
"""Solar generation while in sunlight (W). Assumed constant."""


# ---------------------------------------------------------------------------
# Battery
# ---------------------------------------------------------------------------

BATTERY_CAPACITY_WH: float = 500.0
"""Maximum stored energy (Wh)."""

BATTERY_INITIAL_CHARGE_WH: float = 500.0
"""Stored energy at t = 0 (Wh). Battery starts full."""


# ---------------------------------------------------------------------------
# Orbit lighting
# ---------------------------------------------------------------------------

ORBIT_PERIOD_S: float = 6000.0
"""Duration of one sunlight + eclipse cycle (s)."""

ECLIPSE_FRACTION: float = 0.4
"""Fraction of each orbit spent in eclipse (dimensionless, 0.0–1.0)."""
