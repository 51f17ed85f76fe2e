"""
L4 Execution — Completion barrier.

Blocks the caller until every operation of a batch has reported back,
or a deadline passes.  Scheduled callbacks keep running during the wait
(that is how completions arrive), so this is only safe on the
scheduler's own context.
"""

from __future__ import annotations

import logging
from typing import Callable

from lsp_installer.core.engine.scheduler import Scheduler

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.1
DEFAULT_TIMEOUT = 60.0 * 15


def wait_for_completion(
    scheduler: Scheduler,
    predicate: Callable[[], bool],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    interval: float = DEFAULT_POLL_INTERVAL,
) -> bool:
    """Wait until ``predicate()`` holds.

    Returns:
        True when every operation completed (successfully or not),
        False when ``timeout`` elapsed first.  A timeout says nothing
        about the outcome of the operations still running.
    """
    logger.debug("Waiting for completion (timeout=%ss, interval=%ss)", timeout, interval)
    done = scheduler.wait(timeout, predicate, interval)
    if not done:
        logger.debug("Completion barrier timed out after %ss", timeout)
    return done
