"""
L4 Execution — Interactive install/uninstall queue.

Backs the status surface: ``install_server()`` and ``uninstall_server()``
enqueue and return at once.  Installs run concurrently up to
``max_concurrent``; each reports back through the scheduler, and a
successful install is dispatched as a ready event.  Uninstalls run one
at a time on the scheduler's context.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from lsp_installer.adapters.base import InstallOptions
from lsp_installer.adapters.shell.process import CaptureSink, capture_sink
from lsp_installer.core.engine.scheduler import Scheduler
from lsp_installer.core.services.dispatcher import ReadyDispatcher

if TYPE_CHECKING:
    from lsp_installer.adapters.base import Server

logger = logging.getLogger(__name__)


class ServerStatus(StrEnum):
    QUEUED = "queued"
    INSTALLING = "installing"
    INSTALLED = "installed"
    FAILED = "failed"
    UNINSTALLING = "uninstalling"
    UNINSTALLED = "uninstalled"


_BUSY = (ServerStatus.QUEUED, ServerStatus.INSTALLING, ServerStatus.UNINSTALLING)


@dataclass
class ServerState:
    name: str
    status: ServerStatus
    version: str | None = None
    output: CaptureSink = field(default_factory=capture_sink)
    error: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": str(self.status),
            "version": self.version,
            "error": self.error,
            "tail": self.output.tail(3),
        }


class InstallQueue:
    """Queue of interactive install/uninstall requests."""

    def __init__(
        self,
        scheduler: Scheduler,
        dispatcher: ReadyDispatcher,
        *,
        max_concurrent: int = 4,
    ) -> None:
        self._scheduler = scheduler
        self._dispatcher = dispatcher
        self._max_concurrent = max_concurrent
        self._pending: deque[tuple[Server, str | None]] = deque()
        self._running = 0
        self._uninstalls = 0
        self.states: dict[str, ServerState] = {}

    @property
    def running(self) -> int:
        return self._running

    @property
    def is_idle(self) -> bool:
        return not self._pending and self._running == 0 and self._uninstalls == 0

    def install_server(self, server: Server, version: str | None = None) -> None:
        current = self.states.get(server.name)
        if current is not None and current.status in _BUSY:
            logger.info("%s is already %s, ignoring install request", server.name, current.status)
            return

        self.states[server.name] = ServerState(
            name=server.name, status=ServerStatus.QUEUED, version=version,
        )
        self._pending.append((server, version))
        logger.debug("Queued install of %s (version=%s)", server.name, version or "default")
        self._scheduler.schedule(self._pump)

    def uninstall_server(self, server: Server) -> None:
        current = self.states.get(server.name)
        if current is not None and current.status in _BUSY:
            logger.info("%s is already %s, ignoring uninstall request", server.name, current.status)
            return

        self.states[server.name] = ServerState(name=server.name, status=ServerStatus.UNINSTALLING)
        self._uninstalls += 1
        self._scheduler.schedule(lambda: self._uninstall(server))

    def mark_all_servers_uninstalled(self) -> None:
        """Record that every server is gone (the install root was removed)."""
        for state in self.states.values():
            state.status = ServerStatus.UNINSTALLED
            state.error = ""
        self._dispatcher.forget_all()

    def snapshot(self) -> list[ServerState]:
        return [self.states[name] for name in sorted(self.states)]

    def _pump(self) -> None:
        while self._pending and self._running < self._max_concurrent:
            server, version = self._pending.popleft()
            self._start(server, version)

    def _start(self, server: Server, version: str | None) -> None:
        state = self.states[server.name]
        state.status = ServerStatus.INSTALLING
        self._running += 1
        logger.info("Installing %s", server.name)

        def on_done(success: bool) -> None:
            self._scheduler.schedule(lambda: self._finish(server, success))

        try:
            server.install_attached(
                InstallOptions(stdio_sink=state.output, requested_version=version),
                on_done,
            )
        except Exception as e:
            logger.exception("Install of %s could not be started", server.name)
            state.error = str(e)
            self._finish(server, False)

    def _finish(self, server: Server, success: bool) -> None:
        self._running -= 1
        state = self.states[server.name]
        if success:
            state.status = ServerStatus.INSTALLED
            logger.info("Server %s was successfully installed.", server.name)
            self._dispatcher.dispatch(server)
        else:
            state.status = ServerStatus.FAILED
            if not state.error:
                tail = state.output.tail(1)
                state.error = tail[0] if tail else "install failed"
            logger.error("Server %s failed to install.", server.name)
        self._pump()

    def _uninstall(self, server: Server) -> None:
        state = self.states[server.name]
        try:
            server.uninstall()
        except Exception as e:
            logger.error("Failed to uninstall server %s: %s", server.name, e)
            state.status = ServerStatus.FAILED
            state.error = str(e)
        else:
            state.status = ServerStatus.UNINSTALLED
            self._dispatcher.forget(server.name)
            logger.info("Successfully uninstalled server %s.", server.name)
        finally:
            self._uninstalls -= 1
