"""
Filesystem adapter — the directory primitives the uninstall path needs.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalFilesystem:
    """Directory checks and recursive removal on the local disk."""

    def dir_exists(self, path: Path) -> bool:
        return Path(path).is_dir()

    def rmrf(self, path: Path) -> None:
        """Remove ``path`` recursively.  Raises ``OSError`` on failure.

        A missing path is not an error.
        """
        target = Path(path)
        if target.is_symlink() or target.is_file():
            target.unlink()
        elif target.exists():
            shutil.rmtree(target)
        else:
            return
        logger.debug("Removed %s", target)
