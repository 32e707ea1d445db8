"""Command-line entry point for headless Snake Clash runs."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from snake_clash.engine import GameMode

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return n


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-clash",
        description="Snake Clash headless simulation and configuration tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser("simulate", help="Play matches without a clock.")
    sim_p.add_argument(
        "--mode",
        type=str,
        default=GameMode.VS_AI.value,
        choices=[m.value for m in GameMode],
    )
    sim_p.add_argument("--matches", type=_positive_int, default=1)
    sim_p.add_argument("--max-ticks", type=_positive_int, default=10_000)
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    sim_p.add_argument(
        "--no-autopilot", action="store_true",
        help="Leave player 1 without AI control (it runs straight ahead).",
    )

    # --- config ---
    cfg_p = sub.add_parser("config", help="Print or write the default config.")
    cfg_p.add_argument(
        "--output", type=str, default=None,
        help="Write the config JSON here instead of printing it.",
    )

    return parser


def _run_simulate(args: argparse.Namespace) -> int:
    from snake_clash.config import GameConfig
    from snake_clash.headless import simulate

    config = GameConfig.load(args.config) if args.config else GameConfig()
    if args.seed is not None:
        d = config.to_dict()
        d["seed"] = args.seed
        config = GameConfig.from_dict(d)

    summaries = simulate(
        config,
        args.mode,
        matches=args.matches,
        autopilot=not args.no_autopilot,
        max_ticks=args.max_ticks,
    )
    for s in summaries:
        print(s.summary())  # noqa: T201

    finished = [s for s in summaries if s.completed]
    total_ticks = sum(s.ticks for s in summaries)
    print(  # noqa: T201
        f"Total: {len(finished)}/{len(summaries)} matches finished, "
        f"{total_ticks} ticks"
    )
    return 0


def _run_config(args: argparse.Namespace) -> int:
    from snake_clash.config import GameConfig

    config = GameConfig()
    if args.output:
        config.save(args.output)
    else:
        print(json.dumps(config.to_dict(), indent=2))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-clash`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "config": _run_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
