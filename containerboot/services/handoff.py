"""Process Hand-off: replace the orchestrator with the long-running command."""

import logging
import os
import sys
from collections.abc import Callable, Sequence

from containerboot.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def hand_off(argv: Sequence[str], execvp: Callable = os.execvp) -> None:
    """exec argv in place of the current process; only returns if execvp is faked."""
    if not argv:
        raise ConfigurationError("No command to hand off to")
    logger.info("Application is ready to start!", extra={"command": argv[0]})
    for handler in logging.root.handlers:
        handler.flush()
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        execvp(argv[0], list(argv))
    except FileNotFoundError:
        raise ConfigurationError(f"Hand-off command not found: {argv[0]}")
