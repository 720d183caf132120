"""containerboot CLI: container entrypoint and build-time config rendering.

Invariants:
    - The only place ContainerBootError becomes a process exit status
    - `start` either execs the hand-off command or returns non-zero
    - `render` writes config to stdout or --output, logs go to stderr

Design Decisions:
    - argparse subcommands: start, check-db, render
    - Settings read once per invocation (get_settings cache cleared so tests
      can vary the environment)
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from containerboot import __version__
from containerboot.config import Settings, get_settings
from containerboot.core.errors import ContainerBootError
from containerboot.infrastructure.commands import CommandRunner
from containerboot.infrastructure.observability import setup_logging
from containerboot.renderers.nginx import render_nginx_site
from containerboot.renderers.php_ini import render_php_ini
from containerboot.renderers.supervisor import render_supervisord_conf
from containerboot.services.handoff import hand_off
from containerboot.services.orchestrator import StartupOrchestrator, build_probe

logger = logging.getLogger("containerboot")

RENDER_TARGETS = ("nginx", "supervisor", "php-ini")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="containerboot",
        description="Startup orchestration for the Symfony container.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="action", required=True)

    start = sub.add_parser("start", help="wait for the database, run maintenance, exec CMD")
    start.add_argument(
        "command", nargs=argparse.REMAINDER,
        help="command to exec once ready (default: supervisord)",
    )

    sub.add_parser("check-db", help="run the database health check once")

    render = sub.add_parser("render", help="print a generated config file")
    render.add_argument("target", choices=RENDER_TARGETS)
    render.add_argument(
        "-o", "--output", type=Path,
        help="file to write (directory for php-ini)",
    )
    return parser


def _start(settings: Settings, command: list[str]) -> int:
    if command and command[0] == "--":
        command = command[1:]
    runner = CommandRunner(cwd=settings.app_dir)
    orchestrator = StartupOrchestrator(settings, build_probe(settings, runner), runner)
    asyncio.run(orchestrator.run())
    hand_off(command or settings.default_command)
    return 0


async def _check_db_once(settings: Settings) -> bool:
    probe = build_probe(settings, CommandRunner(cwd=settings.app_dir))
    try:
        return await probe.health_check()
    finally:
        await probe.close()


def _check_db(settings: Settings) -> int:
    if asyncio.run(_check_db_once(settings)):
        logger.info("Database is ready!")
        return 0
    logger.error("Database is not reachable")
    return 1


def _render(settings: Settings, target: str, output: Path | None) -> int:
    if target == "php-ini":
        files = render_php_ini(settings)
        if output is None:
            for name, text in files.items():
                sys.stdout.write(f"; {name}\n{text}")
            return 0
        output.mkdir(parents=True, exist_ok=True)
        for name, text in files.items():
            (output / name).write_text(text)
        return 0

    text = render_nginx_site(settings) if target == "nginx" else render_supervisord_conf(settings)
    if output is None:
        sys.stdout.write(text)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    get_settings.cache_clear()
    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        logger.error(f"Invalid configuration: {e}", extra={"error_code": "CONFIGURATION_ERROR"})
        return 2
    setup_logging(settings.log_level, settings.log_format)

    try:
        if args.action == "start":
            return _start(settings, args.command)
        if args.action == "check-db":
            return _check_db(settings)
        return _render(settings, args.target, args.output)
    except ContainerBootError as e:
        logger.error(e.message, extra=e.to_log_extra())
        return e.exit_code
