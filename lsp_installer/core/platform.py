"""
Platform probes used by the orchestration layer.
"""

from __future__ import annotations

import os
import sys

_TRUTHY = {"1", "true", "yes", "on"}


def is_headless() -> bool:
    """True when no interactive user is attached.

    ``LSPI_HEADLESS`` forces the answer either way; otherwise a process
    whose stdin is not a TTY is treated as headless.
    """
    forced = os.environ.get("LSPI_HEADLESS")
    if forced is not None:
        return forced.strip().lower() in _TRUTHY
    try:
        return not sys.stdin.isatty()
    except (AttributeError, ValueError):
        # stdin replaced or closed
        return True
