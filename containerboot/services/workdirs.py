"""Writable Directories: create Symfony's var/ tree and open its permissions."""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

WORLD_WRITABLE = 0o777


def ensure_writable_dirs(
    root: Path, subdirs: Iterable[str], mode: int = WORLD_WRITABLE,
) -> list[Path]:
    """mkdir -p root/<subdir> for each subdir, then chmod -R mode root."""
    created = []
    for sub in subdirs:
        path = root / sub
        path.mkdir(parents=True, exist_ok=True)
        created.append(path)
    root.mkdir(parents=True, exist_ok=True)

    os.chmod(root, mode)
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            target = os.path.join(dirpath, name)
            if not os.path.islink(target):
                os.chmod(target, mode)
    logger.debug(f"Prepared writable directories under {root}")
    return created
