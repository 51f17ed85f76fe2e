"""
L4 Execution — Install batch state.

One ``InstallBatch`` per synchronous install call.  Completion
callbacks mutate it on the scheduler's context; the barrier reads it.
Invariant: every failed server is also in ``completed``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lsp_installer.core.services.server_install.domain.identifier import ServerIdentifier

if TYPE_CHECKING:
    from lsp_installer.adapters.base import Server


@dataclass
class BatchEntry:
    server: Server
    version: str | None = None


@dataclass
class InstallBatch:
    """Requested identifiers, resolved servers and their outcomes."""

    requested: list[ServerIdentifier] = field(default_factory=list)
    entries: list[BatchEntry] = field(default_factory=list)
    completed: list[Server] = field(default_factory=list)
    failed: list[Server] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def all_completed(self) -> bool:
        return len(self.completed) >= self.total

    @property
    def succeeded(self) -> list[Server]:
        return [s for s in self.completed if s not in self.failed]

    @property
    def outstanding(self) -> list[Server]:
        return [e.server for e in self.entries if e.server not in self.completed]

    def record(self, server: Server, success: bool) -> None:
        self.completed.append(server)
        if not success:
            self.failed.append(server)
