"""
Console status window — the progress surface for the CLI.

Delegates queueing to :class:`InstallQueue` and renders its state as a
plain text summary whenever it is opened.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

import click

from lsp_installer.core.services.server_install.execution.install_queue import (
    InstallQueue,
    ServerStatus,
)

if TYPE_CHECKING:
    from lsp_installer.adapters.base import Server

logger = logging.getLogger(__name__)

_STATUS_STYLE: dict[ServerStatus, tuple[str, str]] = {
    ServerStatus.QUEUED: ("⏳", "white"),
    ServerStatus.INSTALLING: ("🔧", "cyan"),
    ServerStatus.INSTALLED: ("✅", "green"),
    ServerStatus.FAILED: ("❌", "red"),
    ServerStatus.UNINSTALLING: ("🗑️", "yellow"),
    ServerStatus.UNINSTALLED: ("➖", "white"),
}


class ConsoleStatusWindow:
    """Status surface backed by an install queue."""

    def __init__(
        self,
        queue: InstallQueue,
        echo: Callable[[str], None] | None = None,
    ) -> None:
        self.queue = queue
        self.is_open = False
        self._echo = echo or click.echo

    def open(self) -> None:
        self.is_open = True
        self.render()

    def close(self) -> None:
        self.is_open = False

    def install_server(self, server: Server, version: str | None = None) -> None:
        self.queue.install_server(server, version)

    def uninstall_server(self, server: Server) -> None:
        self.queue.uninstall_server(server)

    def mark_all_servers_uninstalled(self) -> None:
        self.queue.mark_all_servers_uninstalled()

    def render(self) -> None:
        if not self.is_open:
            return
        states = self.queue.snapshot()
        if not states:
            self._echo("No servers queued.")
            return
        self._echo(click.style("LSP servers", fg="cyan", bold=True))
        for state in states:
            icon, color = _STATUS_STYLE[state.status]
            version = f"@{state.version}" if state.version else ""
            line = f"   {icon} {state.name}{version} — {state.status}"
            self._echo(click.style(line, fg=color))
            if state.status == ServerStatus.FAILED and state.error:
                self._echo(f"      {state.error}")
