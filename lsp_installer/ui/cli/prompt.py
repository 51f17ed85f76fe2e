"""
Click-backed prompt and notifier.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import click

logger = logging.getLogger(__name__)

_LEVEL_COLORS = {
    logging.ERROR: "red",
    logging.WARNING: "yellow",
    logging.INFO: None,
}


class ClickPrompt:
    """Asks on the terminal.  Ctrl-C / EOF count as "no"."""

    def confirm(self, message: str) -> bool:
        try:
            return click.confirm(message, default=False)
        except click.Abort:
            click.echo()
            return False

    def choose(self, message: str, choices: Sequence[str]) -> int:
        click.echo(message)
        for idx, choice in enumerate(choices, start=1):
            click.echo(f"   {idx}. {choice}")
        try:
            return click.prompt(
                "Select a server (0 to cancel)",
                type=click.IntRange(0, len(choices)),
                default=0,
                show_default=False,
            )
        except click.Abort:
            click.echo()
            return 0


class ClickNotifier:
    """Prints user-facing messages; warnings and errors go to stderr."""

    def notify(self, message: str, level: int = logging.INFO) -> None:
        logger.debug("notify(%s): %s", logging.getLevelName(level), message)
        color = _LEVEL_COLORS.get(level)
        if level >= logging.ERROR:
            message = f"❌ {message}"
        elif level >= logging.WARNING:
            message = f"⚠️  {message}"
        click.secho(message, fg=color, err=level >= logging.WARNING)
