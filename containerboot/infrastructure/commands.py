"""Command Runner: spawns external console commands as async subprocesses.

Invariants:
    - Commands run in the application directory with the orchestrator's environment
    - stdout/stderr are inherited (container streams) unless quiet=True
    - A missing executable returns 127, like a POSIX shell
    - run() never raises on a non-zero exit; callers decide what a failure means
"""

import asyncio
import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127


class CommandRunner:
    """Runs argv lists to completion and reports their exit status."""

    def __init__(self, cwd: Path | str | None = None, env: Mapping[str, str] | None = None):
        self.cwd = Path(cwd) if cwd is not None else None
        self.env = dict(env) if env is not None else None

    async def run(self, argv: Sequence[str], quiet: bool = False) -> int:
        """Run argv and return its exit status."""
        stream = asyncio.subprocess.DEVNULL if quiet else None
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=self.cwd,
                env=self.env if self.env is not None else os.environ.copy(),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=stream,
                stderr=stream,
            )
        except FileNotFoundError:
            logger.error(
                f"Executable not found: {argv[0]}",
                extra={"command": argv[0], "returncode": COMMAND_NOT_FOUND},
            )
            return COMMAND_NOT_FOUND
        return await process.wait()
