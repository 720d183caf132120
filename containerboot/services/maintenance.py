"""Maintenance Runner: executes the maintenance plan in order, exactly once.

Invariants:
    - Steps run strictly in plan order; commands within a step in order
    - A tolerate_failure step logs its failure and the sequence continues
    - Any other non-zero exit raises CommandFailedError and stops the sequence
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from containerboot.core.errors import CommandFailedError
from containerboot.core.startup_plan import MaintenanceStep

logger = logging.getLogger(__name__)


class Runner(Protocol):
    async def run(self, argv: Sequence[str], quiet: bool = False) -> int: ...


async def run_step(step: MaintenanceStep, runner: Runner) -> bool:
    """Run one step; return False if a tolerated command failed."""
    logger.info(f"{step.description}...", extra={"step": step.name})
    for argv in step.commands:
        returncode = await runner.run(argv)
        if returncode == 0:
            continue
        if step.tolerate_failure:
            logger.warning(
                f"Step '{step.name}' failed with exit code {returncode}, continuing",
                extra={"step": step.name, "returncode": returncode},
            )
            return False
        raise CommandFailedError(step.name, tuple(argv), returncode)
    return True


async def run_maintenance(steps: Sequence[MaintenanceStep], runner: Runner) -> list[str]:
    """Run every step; return the names of steps that were executed."""
    executed = []
    for step in steps:
        await run_step(step, runner)
        executed.append(step.name)
    return executed
