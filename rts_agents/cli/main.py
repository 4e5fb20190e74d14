"""CLI entry point for rts-agents."""

import argparse
import sys


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="rts-agents",
        description="Inspect the resource and path search controllers",
    )
    parser.add_argument("--config", help="Path to config.yaml (default: auto-discover)")
    subparsers = parser.add_subparsers(dest="command")

    # ── plan ────────────────────────────────────────────────────────
    plan_parser = subparsers.add_parser("plan", help="Plan a path on a YAML grid map")
    plan_parser.add_argument("--map", dest="map_file", required=True, help="Map file (YAML)")
    plan_parser.add_argument("--axis-cost", type=int, help="Cost of a horizontal or vertical step")
    plan_parser.add_argument("--diagonal-cost", type=int, help="Cost of a diagonal step")

    # ── build-order ─────────────────────────────────────────────────
    subparsers.add_parser("build-order", help="Show the configured build order")

    # ── config ──────────────────────────────────────────────────────
    subparsers.add_parser("config", help="Print the effective configuration")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from rts_agents.cli import commands

    if args.command == "plan":
        commands.cmd_plan(
            args.map_file,
            config_file=args.config,
            axis_cost=args.axis_cost,
            diagonal_cost=args.diagonal_cost,
        )
    elif args.command == "build-order":
        commands.cmd_build_order(config_file=args.config)
    elif args.command == "config":
        commands.cmd_config(config_file=args.config)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
