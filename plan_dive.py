#!/usr/bin/env python3
"""
Decompression planner CLI.

Usage:
    python plan_dive.py 30 20                     # Air, 30m for 20 min
    python plan_dive.py 50 25 --o2 21 --he 35     # Trimix 21/35
    python plan_dive.py 40 40 --gf 30 85 --json   # JSON output
    python plan_dive.py 30 20 --ndl               # Also search the no-deco limit
    python plan_dive.py 40 40 --plot plan.png     # Save a profile chart
"""

import argparse
import json
import logging
import sys

from decoplan import DecompressionScheduler, GasMix, ValidationError
from decoplan.config import load_effective_config
from decoplan.gas import validate_plan_request
from decoplan.pressure import equivalent_air_depth

logger = logging.getLogger("plan_dive")


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=log_format,
        handlers=[logging.StreamHandler()],
    )


def print_plan(plan, depth: float, time: float, gas: GasMix, gf) -> None:
    """Print plan summary."""
    print("\n" + "=" * 60)
    print(f"DIVE PLAN: {depth:g}m for {time:g} min on {gas.label}")
    print("=" * 60)
    print(f"Gradient factors: {gf.gf_low * 100:.0f}/{gf.gf_high * 100:.0f}")
    if gas.o2 > 0:
        print(f"MOD ({gas.max_po2} bar ppO2): {gas.mod:.1f}m")
    if gas.he == 0:
        print(f"EAD: {equivalent_air_depth(depth, gas.o2):.1f}m")

    print("\n--- STOPS ---")
    if not plan.stops:
        print("No stops required")
    for stop in plan.stops:
        print(f"{stop.depth_m:>4d}m  {stop.duration_min:>5.1f} min")

    print("\n--- SUMMARY ---")
    print(f"Total runtime: {plan.total_runtime_min:.1f} min")
    if plan.no_decompression_limit_min:
        print(f"Within no-deco limit ({plan.no_decompression_limit_min:g} min)")
    elif plan.requires_decompression:
        print("Staged decompression REQUIRED")
    print(f"Final ceiling: {plan.ceiling_depth_m}m")
    if plan.truncated:
        print("\nWARNING: schedule truncated at the stop-time limit.")
        print("The ceiling never cleared; do not use this plan.")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Bühlmann ZH-L16C decompression planner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("depth", type=float, help="Max depth (m)")
    parser.add_argument("time", type=float, help="Bottom time (min)")
    parser.add_argument("--o2", type=float, default=None, help="O2 percentage")
    parser.add_argument("--he", type=float, default=None, help="He percentage")
    parser.add_argument(
        "--gf",
        nargs=2,
        type=int,
        metavar=("LOW", "HIGH"),
        help="Gradient factors in percent, e.g. --gf 30 85",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to config.yaml")
    parser.add_argument("--json", action="store_true", help="Print the plan as JSON")
    parser.add_argument("--plot", type=str, default=None, help="Save a profile chart")
    parser.add_argument(
        "--ndl", action="store_true", help="Search the no-deco limit at this depth"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_effective_config(gf_override=args.gf, config_path=args.config)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    gf = config["gf"]
    gas = config["gas"]
    if args.o2 is not None or args.he is not None:
        gas = GasMix.from_percentages(
            o2=args.o2 if args.o2 is not None else gas.o2 * 100,
            he=args.he if args.he is not None else 0.0,
            max_po2=gas.max_po2,
        )

    try:
        validate_plan_request(args.depth, args.time, gas)
    except ValidationError as e:
        print(f"ERROR: {e}")
        return 1

    logger.debug(f"Config from {config['config_path']} (GF source: {config['gf_source']})")

    scheduler = DecompressionScheduler.from_config(config["deco"])
    plan = scheduler.plan(args.depth, args.time, gas.o2, gas.he, gf.gf_low, gf.gf_high)

    ndl = None
    if args.ndl:
        ndl = scheduler.find_no_decompression_limit(
            args.depth, gas.o2, gas.he, gf.gf_low, gf.gf_high
        )

    if args.json:
        output = plan.to_dict()
        if ndl is not None:
            output["ndl_search_min"] = ndl
        print(json.dumps(output, indent=2))
    else:
        print_plan(plan, args.depth, args.time, gas, gf)
        if ndl is not None:
            print(f"No-deco limit at {args.depth:g}m: {ndl} min")

    if args.plot:
        from decoplan.plotting import plot_plan

        plot_plan(
            plan,
            args.depth,
            args.time,
            title=f"{args.depth:g}m / {args.time:g} min on {gas.label}",
            save_path=args.plot,
        )
        if not args.json:
            print(f"\nPlot saved to: {args.plot}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
