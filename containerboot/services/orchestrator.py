"""Startup Orchestrator: sequences the container's startup before hand-off.

Invariants:
    - Sequence is fixed: announce, DSN log, readiness wait, maintenance,
      writable dirs; hand-off happens in the caller after run() returns
    - DATABASE_URL is only ever logged redacted; absence is a warning
    - The only retried condition is database unreachability
    - The probe is always closed, whatever the outcome

Design Decisions:
    - Collaborators injected (probe, runner, sleep): cli.py wires real ones,
      tests wire fakes
    - run() is async and never execs, so the whole sequence is testable;
      hand_off() is the only step that leaves Python
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from containerboot.config import Settings
from containerboot.core.redact import redact_dsn
from containerboot.core.startup_plan import (
    MaintenanceStep, build_maintenance_plan, health_check_command,
)
from containerboot.infrastructure.commands import CommandRunner
from containerboot.infrastructure.database import ConsoleProbe, DatabaseProbe
from containerboot.services.maintenance import Runner, run_maintenance
from containerboot.services.wait_for_database import (
    HealthProbe, RetryPolicy, Sleep, wait_for_database,
)
from containerboot.services.workdirs import ensure_writable_dirs

logger = logging.getLogger(__name__)


@dataclass
class StartupReport:
    """Outcome of a successful startup sequence."""
    attempts: int
    steps: list[str] = field(default_factory=list)
    directories: list[Path] = field(default_factory=list)


def build_probe(settings: Settings, runner: CommandRunner) -> HealthProbe:
    """Pick the health probe for HEALTH_CHECK_MODE."""
    if settings.health_check_mode == "console":
        return ConsoleProbe(health_check_command(settings), runner)
    return DatabaseProbe(settings.database_url)


class StartupOrchestrator:
    """Runs the pre-serve startup sequence once."""

    def __init__(
        self,
        settings: Settings,
        probe: HealthProbe,
        runner: Runner,
        sleep: Sleep = asyncio.sleep,
        plan: list[MaintenanceStep] | None = None,
    ):
        self.settings = settings
        self.probe = probe
        self.runner = runner
        self.sleep = sleep
        self.plan = plan if plan is not None else build_maintenance_plan(settings)

    def log_connection_descriptor(self) -> None:
        if self.settings.database_url:
            logger.info(
                f"DATABASE_URL is set: {redact_dsn(self.settings.database_url)}",
            )
        else:
            logger.warning("WARNING: DATABASE_URL is not set!")

    async def run(self) -> StartupReport:
        """Wait for the database, run maintenance, prepare directories."""
        logger.info("Starting Symfony application...")
        self.log_connection_descriptor()
        try:
            attempts = await wait_for_database(
                self.probe, RetryPolicy.from_settings(self.settings), self.sleep,
            )
        finally:
            await self.probe.close()

        steps = await run_maintenance(self.plan, self.runner)

        directories = ensure_writable_dirs(
            Path(self.settings.app_dir) / self.settings.writable_root,
            self.settings.writable_subdirs,
        )
        return StartupReport(attempts=attempts, steps=steps, directories=directories)
