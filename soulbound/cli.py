"""Command-line entry point: run a registry scenario and print JSON results

Usage:
    python run.py config/scenarios/migrate_and_unlock.yaml
    python run.py scenario.yaml --config config/config.yaml --quiet
    python run.py scenario.yaml --event-file logs/events.jsonl
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from dotenv import load_dotenv

from .config import DEFAULT_CONFIG_PATH, get_validated_config, load_config
from .scenario import load_scenario, run_scenario


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Run a soulbound registry scenario"
    )
    parser.add_argument("scenario", help="Path to scenario YAML file")
    parser.add_argument(
        "--config", default=str(DEFAULT_CONFIG_PATH), help="Path to config file"
    )
    parser.add_argument(
        "--event-file",
        default=None,
        help="Write committed events to this JSONL file (overrides logging.event_file)",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print failed steps")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI. Returns 0 when every step succeeded, 1 otherwise."""
    load_dotenv()
    args: argparse.Namespace = build_parser().parse_args(argv)

    load_config(args.config)
    config = get_validated_config()
    if args.event_file:
        config = config.model_copy(
            update={"logging": config.logging.model_copy(update={"event_file": args.event_file})}
        )

    logging.basicConfig(
        level=getattr(logging, config.logging.level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    results: list[dict[str, Any]] = run_scenario(load_scenario(args.scenario), config)
    for result in results:
        if args.quiet and result.get("success"):
            continue
        print(json.dumps(result))

    return 0 if all(r.get("success") for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
