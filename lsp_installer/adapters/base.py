"""
Adapter contracts — the protocols between the orchestration core and
its collaborators.

The core only talks to servers, the registry, the filesystem and the
user-facing surfaces through these protocols.  Concrete implementations
live next to this module (``registry.py``, ``shell/``, ``mock.py``) and
in ``ui/cli``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from lsp_installer.core.services.server_install.domain.lookup import LookupResult


@runtime_checkable
class StdioSink(Protocol):
    """Receives a process's output as it is produced."""

    def stdout(self, chunk: str) -> None: ...

    def stderr(self, chunk: str) -> None: ...


@dataclass
class InstallOptions:
    """Options passed to ``Server.install_attached``."""

    stdio_sink: StdioSink
    requested_version: str | None = None


DoneCallback = Callable[[bool], None]


@runtime_checkable
class Server(Protocol):
    """An installable server.

    ``install_attached`` must return promptly and report the outcome
    exactly once through ``on_done``, from any thread.  ``uninstall``
    blocks and raises on failure.
    """

    name: str

    def is_installed(self) -> bool: ...

    def install_attached(self, options: InstallOptions, on_done: DoneCallback) -> None: ...

    def uninstall(self) -> None: ...


class ServerRegistryPort(Protocol):
    """Resolves server names to server objects."""

    def get_server(self, name: str) -> LookupResult: ...

    def get_available_server_names(self) -> set[str]: ...

    def get_installed_servers(self) -> list[Server]: ...


class Filesystem(Protocol):
    def dir_exists(self, path: Path) -> bool: ...

    def rmrf(self, path: Path) -> None: ...


class StatusWindow(Protocol):
    """Progress surface and install/uninstall queue."""

    def open(self) -> None: ...

    def close(self) -> None: ...

    def install_server(self, server: Server, version: str | None = None) -> None: ...

    def uninstall_server(self, server: Server) -> None: ...

    def mark_all_servers_uninstalled(self) -> None: ...


class Prompt(Protocol):
    """Blocking questions to the user."""

    def confirm(self, message: str) -> bool: ...

    def choose(self, message: str, choices: Sequence[str]) -> int:
        """Return the 1-based index of the chosen entry, 0 if declined."""
        ...


class Notifier(Protocol):
    """User-visible, non-fatal messages (``level`` is a logging level)."""

    def notify(self, message: str, level: int) -> None: ...
