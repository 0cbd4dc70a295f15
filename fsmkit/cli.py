#!/usr/bin/env python3
"""
Command-line interface for inspecting and driving machine configurations
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Iterator, List

from .core import StateMachine
from .errors import FSMError, InvalidTransition
from .utils import format_token
from .models import Hook, MachineConfig
from .parser import ConfigParser


logger = logging.getLogger(__name__)


class LoggingHooks(Mapping):
    """Resolves every hook name to a hook that only logs its invocation"""

    def __getitem__(self, name: str) -> Hook:
        def hook():
            logger.info(f"hook {name}")
        return hook

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str)

    def __iter__(self) -> Iterator[str]:
        return iter(())

    def __len__(self) -> int:
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsm-tool",
        description="Validate, visualize and drive state machine configurations"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Check a configuration file")
    validate.add_argument("config_file", type=Path, help="Machine configuration YAML file")

    visualize = subparsers.add_parser("visualize", help="Print a PlantUML state diagram")
    visualize.add_argument("config_file", type=Path, help="Machine configuration YAML file")
    visualize.add_argument(
        "-o", "--output",
        type=Path,
        help="Output file for the diagram"
    )

    run = subparsers.add_parser("run", help="Feed events to a machine and print each transition")
    run.add_argument("config_file", type=Path, help="Machine configuration YAML file")
    run.add_argument("events", nargs="+", help="Events to send, in order")
    run.add_argument(
        "-n", "--name",
        default="fsm",
        help="Machine name used in logs and metrics (default: %(default)s)"
    )

    return parser


def load_config(path: Path) -> MachineConfig:
    return ConfigParser.from_file(path, hooks=LoggingHooks())


async def run_events(machine: StateMachine, events: List[str]) -> None:
    """Send events one at a time, printing every transition"""
    for event in events:
        await machine.send(event)
        print(f"{format_token(machine.previous)} --{event}--> {format_token(machine.state)}")


def main(argv=None):
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_config(args.config_file)
    except (OSError, FSMError) as e:
        print(f"Error loading configuration: {e}")
        sys.exit(1)

    if args.command == "validate":
        print(f"{args.config_file}: {len(config.states)} states, "
              f"{len(config.events)} events, initial state {format_token(config.initial)}")
        sys.exit(0)

    if args.command == "visualize":
        diagram = StateMachine(config, name=args.config_file.stem).visualize()
        if args.output:
            args.output.write_text(diagram + "\n")
            print(f"Diagram written to {args.output}")
        else:
            print(diagram)
        sys.exit(0)

    machine = StateMachine(config, name=args.name)
    print(f"Initial state: {format_token(machine.state)}")
    try:
        asyncio.run(run_events(machine, args.events))
    except InvalidTransition as e:
        print(f"Error: {e}")
        print(f"Available events: {', '.join(map(format_token, machine.available_events())) or 'none'}")
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
