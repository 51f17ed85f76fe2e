"""
Server registry — name → server lookup.

The orchestration core never constructs servers; it asks the registry.
Lookups return ``Found`` or ``NotFound`` (with a "did you mean"
suggestion when a close name exists).
"""

from __future__ import annotations

import difflib
import logging
from concurrent.futures import Executor, ThreadPoolExecutor

from lsp_installer.adapters.base import Server
from lsp_installer.adapters.shell.command import CommandServer
from lsp_installer.core.config.settings import Settings
from lsp_installer.core.services.server_install.domain.lookup import (
    Found,
    LookupResult,
    NotFound,
)

logger = logging.getLogger(__name__)


class ServerRegistry:
    """In-memory registry of available servers."""

    def __init__(self, servers: list[Server] | None = None) -> None:
        self._servers: dict[str, Server] = {}
        for server in servers or []:
            self.register(server)

    def register(self, server: Server) -> None:
        if server.name in self._servers:
            logger.warning("Overwriting existing server: %s", server.name)
        self._servers[server.name] = server
        logger.debug("Registered server: %s", server.name)

    def get_server(self, name: str) -> LookupResult:
        server = self._servers.get(name)
        if server is not None:
            return Found(server)

        reason = f'Server "{name}" is not a valid entry.'
        close = difflib.get_close_matches(name, self._servers.keys(), n=3, cutoff=0.6)
        if close:
            reason += f" Did you mean {', '.join(close)}?"
        return NotFound(name=name, reason=reason)

    def get_available_server_names(self) -> set[str]:
        return set(self._servers)

    def get_available_servers(self) -> list[Server]:
        return [self._servers[name] for name in sorted(self._servers)]

    def get_installed_servers(self) -> list[Server]:
        return [s for s in self.get_available_servers() if s.is_installed()]

    def get_uninstalled_servers(self) -> list[Server]:
        return [s for s in self.get_available_servers() if not s.is_installed()]

    def __len__(self) -> int:
        return len(self._servers)

    def __contains__(self, name: object) -> bool:
        return name in self._servers


def build_registry(settings: Settings, executor: Executor | None = None) -> ServerRegistry:
    """Create a registry with one ``CommandServer`` per configured server.

    All servers share ``executor``; by default a thread pool sized by
    ``settings.max_concurrent_installers``.
    """
    if executor is None:
        executor = ThreadPoolExecutor(
            max_workers=settings.max_concurrent_installers,
            thread_name_prefix="lsp-install",
        )
    registry = ServerRegistry()
    for name, spec in settings.servers.items():
        registry.register(
            CommandServer(
                name,
                settings.install_root_dir,
                spec.install,
                executor,
                default_version=spec.default_version,
                description=spec.description,
            )
        )
    logger.debug("Built registry with %d servers", len(registry))
    return registry
