"""
simulation_runner.py
====================
Satellite Power Simulation — Simulation Runner

Connects the satpower modules into a one-day battery energy balance run:

Execution sequence:
    1. Build the simulation config        (battery_model.SimulationConfig)
    2. Compute per-orbit energy balance   (power_model.compute_orbit_energy_balance)
    3. Simulate battery charge over time  (battery_model.BatterySimulator.run)
    4. Report battery depletion, if any
    5. Print console summary
    6. Plot battery charge and power vs time

Usage:
    python simulation_runner.py [--eclipse-fraction 0.35] [--no-show] ...
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

import matplotlib.pyplot as plt

from satpower import config
from satpower.battery_model import (
    BatterySimulator,
    InvalidConfig,
    SimulationConfig,
    SimulationResult,
)
from satpower.power_model import compute_orbit_energy_balance, compute_orbit_durations

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Execution parameters (not physics)
# ---------------------------------------------------------------------------

PLOT_OUTPUT_FILE: str = "battery_charge_vs_time.png"


# ---------------------------------------------------------------------------
# Step 1: Command line → SimulationConfig
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Satellite battery charge over one orbital day",
    )
    parser.add_argument("--duration", type=float, default=config.SIMULATION_TIME_S,
                        help="Simulated time span (s)")
    parser.add_argument("--step", type=float, default=config.TIME_STEP_S,
                        help="Time step (s)")
    parser.add_argument("--payload-power", type=float, default=config.PAYLOAD_POWER_W,
                        help="Payload consumption (W)")
    parser.add_argument("--comms-power", type=float, default=config.COMMS_POWER_W,
                        help="Communication consumption (W)")
    parser.add_argument("--obc-power", type=float, default=config.OBC_POWER_W,
                        help="On-board computer consumption (W)")
    parser.add_argument("--aocs-power", type=float, default=config.AOCS_POWER_W,
                        help="Attitude & orbit control consumption (W)")
    parser.add_argument("--solar-power", type=float, default=config.SOLAR_POWER_W,
                        help="Solar generation while sunlit (W)")
    parser.add_argument("--capacity", type=float, default=config.BATTERY_CAPACITY_WH,
                        help="Battery capacity (Wh)")
    parser.add_argument("--initial-charge", type=float,
                        default=config.BATTERY_INITIAL_CHARGE_WH,
                        help="Initial battery charge (Wh)")
    parser.add_argument("--orbit-period", type=float, default=config.ORBIT_PERIOD_S,
                        help="Orbit period (s)")
    parser.add_argument("--eclipse-fraction", type=float, default=config.ECLIPSE_FRACTION,
                        help="Fraction of the orbit spent in eclipse (0-1)")
    parser.add_argument("--plot-file", default=PLOT_OUTPUT_FILE,
                        help="Output PNG for the plots")
    parser.add_argument("--no-plot", action="store_true", help="Skip plotting")
    parser.add_argument("--no-show", action="store_true",
                        help="Save the plot without opening a window")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Build a validated config from parsed command line arguments.

    Raises:
        InvalidConfig: If any resulting parameter is out of range.
    """
    loads = {
        "payload": args.payload_power,
        "comms":   args.comms_power,
        "obc":     args.obc_power,
        "aocs":    args.aocs_power,
    }
    return SimulationConfig.from_subsystem_loads(
        loads,
        duration_s=args.duration,
        step_s=args.step,
        solar_power_w=args.solar_power,
        battery_capacity_wh=args.capacity,
        initial_charge_wh=args.initial_charge,
        orbit_period_s=args.orbit_period,
        eclipse_fraction=args.eclipse_fraction,
    )


# ---------------------------------------------------------------------------
# Step 4: Depletion notice
# ---------------------------------------------------------------------------

def notify_depletion(result: SimulationResult) -> str | None:
    """Print and return the depletion message, or None if the battery held."""
    if not result.depleted:
        return None
    message = f"Battery depleted at t = {result.depleted_at_h:g} hours"
    print(message)
    return message


# ---------------------------------------------------------------------------
# Step 5: Console summary
# ---------------------------------------------------------------------------

def print_report(result: SimulationResult) -> None:
    """Print a structured console summary of a simulation run."""
    cfg = result.config
    durations = compute_orbit_durations(cfg.orbit_period_s, cfg.eclipse_fraction)
    balance = compute_orbit_energy_balance(
        cfg.orbit_period_s, cfg.eclipse_fraction, cfg.solar_power_w, cfg.power_draw_w,
    )
    sep = "─" * 60

    print(f"\n{'═' * 60}")
    print("  SATELLITE POWER SIMULATION — SUMMARY")
    print(f"{'═' * 60}")
    print(f"  Simulation window          : {cfg.duration_s / 3600:.2f} h  "
          f"(dt = {cfg.step_s:g} s)")
    print(f"  Steps recorded             : {result.num_steps} / {cfg.num_steps}")
    print(sep)
    print(f"  Power consumption          : {cfg.power_draw_w:7.2f} W  (constant)")
    print(f"  Solar generation (sunlit)  : {cfg.solar_power_w:7.2f} W  (constant)")
    print(f"  Orbit period               : {cfg.orbit_period_s / 60:7.2f} min")
    print(f"  Sunlit / eclipse per orbit : {durations['sunlit_s'] / 60:.2f} / "
          f"{durations['eclipse_s'] / 60:.2f} min")
    print(sep)
    print(f"  Energy generated per orbit : {balance['generated_wh']:8.3f} Wh")
    print(f"  Energy consumed per orbit  : {balance['consumed_wh']:8.3f} Wh")
    print(f"  Net energy per orbit       : {balance['net_wh']:8.3f} Wh  "
          f"[{'✔ SUSTAINABLE' if balance['sustainable'] else '✘ DEFICIT'}]")
    print(sep)
    print(f"  Battery capacity           : {cfg.battery_capacity_wh:8.3f} Wh")
    print(f"  Initial battery charge     : {cfg.initial_charge_wh:8.3f} Wh")
    print(f"  Final battery charge       : {result.final_charge_wh:8.3f} Wh  "
          f"({result.soc[-1]:.1%})")
    print(f"  Minimum battery charge     : {result.min_charge_wh:8.3f} Wh")
    if result.depleted:
        print(f"  Battery depleted at        : {result.depleted_at_h:.3f} h")
    else:
        print("  Battery survived the full simulation window.")
    print(f"{'═' * 60}\n")


# ---------------------------------------------------------------------------
# Step 6: Plots
# ---------------------------------------------------------------------------

def plot_results(
    result: SimulationResult,
    output_file: str = PLOT_OUTPUT_FILE,
    show: bool = True,
) -> None:
    """Render and save battery charge and power reference lines vs time."""
    cfg = result.config
    times_h = result.time_h

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 7), sharex=True)

    # ── Battery charge ──────────────────────────────────────────────────
    ax1.plot(times_h, result.charge_wh, color="#4CAF50", linewidth=2,
             label="Battery charge")
    ax1.axhline(cfg.battery_capacity_wh, color="#F44336", linewidth=1.2,
                linestyle="--", label=f"Capacity ({cfg.battery_capacity_wh:.0f} Wh)")
    if result.depleted:
        ax1.axvline(result.depleted_at_h, color="#FF9800", linewidth=1.2,
                    linestyle="-.", label=f"Depleted ({result.depleted_at_h:.2f} h)")

    ax1.set_ylabel("Battery Charge [Wh]", fontsize=11)
    ax1.set_title("Satellite Battery Charge over Time", fontsize=10, loc="left")
    ax1.legend(fontsize=9, loc="lower left")
    ax1.grid(True, linestyle="--", alpha=0.5)

    # ── Power reference lines ───────────────────────────────────────────
    ax2.plot(times_h, [cfg.power_draw_w] * len(times_h), color="r", linewidth=2,
             label="Power Consumption")
    ax2.plot(times_h, [cfg.solar_power_w] * len(times_h), color="b", linewidth=2,
             label="Solar Power Generation")

    ax2.set_xlabel("Time [hours]", fontsize=11)
    ax2.set_ylabel("Power [W]", fontsize=11)
    ax2.set_title("Satellite Power Usage and Generation", fontsize=10, loc="left")
    ax2.legend(fontsize=9)
    ax2.grid(True, linestyle="--", alpha=0.5)

    fig.tight_layout()
    fig.savefig(output_file, dpi=150, bbox_inches="tight")
    print(f"  [plot] Saved → {output_file}")
    if show:
        plt.show()
    else:
        plt.close(fig)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        sim_config = config_from_args(args)
    except InvalidConfig as exc:
        parser.error(str(exc))

    logger.debug("Running simulation with %s", sim_config)
    print("\nRunning satellite power simulation...", flush=True)
    result = BatterySimulator(sim_config).run()

    notify_depletion(result)
    print_report(result)

    if not args.no_plot:
        plot_results(result, output_file=args.plot_file, show=not args.no_show)


if __name__ == "__main__":
    main()
