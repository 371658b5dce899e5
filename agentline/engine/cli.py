"""CLI entry point — render the activity timeline of a saved transcript.

Usage:
    agentline transcript.json
    agentline transcript.json --loading --mode build
    agentline transcript.json --json > turns.json
"""
from __future__ import annotations

import argparse
import json
import logging
import sys

from rich.console import Console

from agentline.shared.transcript import load_transcript
from agentline.tui.rendering import render_status_rich, render_turns_rich

from .config import ActivityConfig
from .errors import AgentlineError
from .status import status_from_messages
from .turn_builder import build_turns
from .yaml_config import load_yaml_config

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentline",
        description="Render an agent transcript as a turn-grouped activity timeline",
    )
    parser.add_argument("transcript", help="JSON file holding the message list")
    parser.add_argument(
        "--loading",
        action="store_true",
        help="Treat the session as still streaming",
    )
    parser.add_argument(
        "--mode",
        default="build",
        help="Active agent mode: plan, build or research (default: build)",
    )
    parser.add_argument(
        "--awaiting-input",
        action="store_true",
        help="An interactive question is waiting for an answer",
    )
    parser.add_argument(
        "--expanded",
        action="store_true",
        help="Show tool results under each tool line",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print turns and status as JSON instead of rendered text",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML config file with an 'activity' section",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        config = load_yaml_config(args.config) if args.config else ActivityConfig.from_env()
    except AgentlineError as exc:
        logging.basicConfig(level=logging.INFO)
        logger.error("%s", exc)
        return 1

    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        messages = load_transcript(args.transcript)
    except AgentlineError as exc:
        logger.error("%s", exc)
        return 1

    turns = build_turns(messages, args.loading, config)
    status = status_from_messages(
        messages,
        active_mode=args.mode,
        is_loading=args.loading,
        awaiting_input=args.awaiting_input,
        config=config,
    )

    if args.json:
        payload = {
            "status": status.to_dict(),
            "turns": [t.to_dict() for t in turns],
        }
        sys.stdout.write(json.dumps(payload, indent=2, sort_keys=True) + "\n")
        return 0

    console = Console()
    console.print(render_status_rich(status))
    console.print()
    if turns:
        console.print(render_turns_rich(turns, expanded=args.expanded))
    else:
        console.print("[dim]No activity yet.[/dim]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
