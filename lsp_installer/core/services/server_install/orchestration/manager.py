"""
L5 Orchestration — ServerManager, the entry point callers use.

Two flavours of every operation:

- Interactive (``install``, ``uninstall``): resolve, hand off to the
  status surface's queue, return at once.  A missing server is shown to
  the user and is not an error.
- Synchronous (``install_sync``, ``uninstall_sync``): meant for headless
  runs.  Resolve everything first, run, block until done, log every
  outcome, and raise an ``InstallerError`` on any failure.  When the
  manager is headless, a fatal error also schedules ``SystemExit`` on
  the scheduler, so the process exits non-zero once pending callbacks
  have drained.

Two synchronous batches, or a batch and ``uninstall_all``, must not
run against the same install root at the same time.  Nothing here
locks; that is the caller's responsibility.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Callable, NoReturn

from lsp_installer.adapters.base import InstallOptions, StdioSink
from lsp_installer.adapters.shell.filesystem import LocalFilesystem
from lsp_installer.adapters.shell.process import simple_sink
from lsp_installer.core.config.settings import Settings
from lsp_installer.core.engine.scheduler import Scheduler
from lsp_installer.core.services.dispatcher import ReadyCallback, ReadyDispatcher
from lsp_installer.core.services.server_install.data.language_aliases import (
    LANGUAGE_ALIASES,
)
from lsp_installer.core.services.server_install.domain.errors import (
    BarrierTimeoutError,
    BatchInstallError,
    FilesystemError,
    InstallerError,
    ResolutionError,
    UninstallError,
)
from lsp_installer.core.services.server_install.domain.identifier import (
    parse_server_identifier,
)
from lsp_installer.core.services.server_install.domain.lookup import NotFound
from lsp_installer.core.services.server_install.execution.barrier import (
    wait_for_completion,
)
from lsp_installer.core.services.server_install.execution.batch import (
    BatchEntry,
    InstallBatch,
)
from lsp_installer.core.services.server_install.resolver.alias_resolution import (
    get_install_completion,
    resolve_alias,
)

if TYPE_CHECKING:
    from lsp_installer.adapters.base import (
        Filesystem,
        Notifier,
        Prompt,
        ServerRegistryPort,
        StatusWindow,
    )

logger = logging.getLogger(__name__)


def _exit(code: int) -> None:
    raise SystemExit(code)


def display_path(path: Path) -> str:
    """``path`` with the home directory shortened to ``~``."""
    try:
        return "~/" + str(Path(path).relative_to(Path.home()))
    except ValueError:
        return str(path)


class ServerManager:
    """Coordinates server installs, uninstalls and ready events.

    Args:
        registry: Resolves names to servers.
        status_window: Progress surface; also the interactive queue.
        prompt: Asks the user to confirm or choose.
        notifier: Shows non-fatal messages.
        scheduler: The execution context completions are delivered on.
        dispatcher: Ready-event dispatcher shared with the status window.
        settings: Install root and barrier tuning.
        filesystem: Directory primitives for ``uninstall_all``.
        headless: Schedule a non-zero process exit on fatal errors.
        aliases: Language alias table.
        sink_factory: Creates the stdio sink for each synchronous install.
    """

    def __init__(
        self,
        registry: ServerRegistryPort,
        status_window: StatusWindow,
        *,
        prompt: Prompt,
        notifier: Notifier,
        scheduler: Scheduler,
        dispatcher: ReadyDispatcher,
        settings: Settings | None = None,
        filesystem: Filesystem | None = None,
        headless: bool = False,
        aliases: Mapping[str, Sequence[str]] = LANGUAGE_ALIASES,
        sink_factory: Callable[[], StdioSink] = simple_sink,
    ) -> None:
        self.registry = registry
        self.status_window = status_window
        self.prompt = prompt
        self.notifier = notifier
        self.scheduler = scheduler
        self.dispatcher = dispatcher
        self.settings = settings or Settings()
        self.filesystem = filesystem or LocalFilesystem()
        self.headless = headless
        self.aliases = aliases
        self.sink_factory = sink_factory

    # ── Errors ──────────────────────────────────────────────────

    def raise_error(
        self, error: InstallerError, cause: BaseException | None = None,
    ) -> NoReturn:
        """Raise ``error``; when headless, also schedule a process exit.

        The exit is scheduled rather than immediate so callbacks and log
        lines already queued still run.
        """
        if self.headless:
            self.scheduler.schedule(lambda: _exit(error.exit_code))
        raise error from cause

    # ── Install ─────────────────────────────────────────────────

    def install(self, server_identifier: str) -> None:
        """Queue a server install and open the status window.

        ``server_identifier`` may carry a version (``rust_analyzer@nightly``)
        or be a language alias (``python``), in which case the user is
        asked which server to install.  Returns without waiting.
        """
        identifier = resolve_alias(
            parse_server_identifier(server_identifier), self.prompt, self.aliases,
        )
        if identifier is None:
            # No selection was made
            return

        result = self.registry.get_server(identifier.name)
        if isinstance(result, NotFound):
            self.notifier.notify(
                f"Unable to find LSP server {identifier.name}.\n\n{result.reason}",
                logging.ERROR,
            )
            return

        self.status_window.install_server(result.server, identifier.version)
        self.status_window.open()

    def install_sync(self, server_identifiers: Sequence[str]) -> InstallBatch:
        """Install servers and block until all of them report back.

        Every identifier is resolved before any install starts, so an
        unknown name aborts the batch with nothing started.

        Returns:
            The completed batch (only when every install succeeded).

        Raises:
            ResolutionError: An identifier matched no server.
            BatchInstallError: One or more installs failed.
            BarrierTimeoutError: Not every install reported back in time.
        """
        batch = InstallBatch()

        for raw in server_identifiers:
            identifier = parse_server_identifier(raw)
            result = self.registry.get_server(identifier.name)
            if isinstance(result, NotFound):
                logger.debug(result.reason)
                self.raise_error(ResolutionError(identifier.name))
            batch.requested.append(identifier)
            batch.entries.append(BatchEntry(server=result.server, version=identifier.version))

        for entry in batch.entries:
            self._start_attached(batch, entry)

        done = wait_for_completion(
            self.scheduler,
            lambda: batch.all_completed,
            timeout=self.settings.barrier_timeout,
            interval=self.settings.barrier_poll_interval,
        )
        if not done:
            outstanding = [s.name for s in batch.outstanding]
            for name in outstanding:
                logger.warning("Server %s did not finish installing in time.", name)
            self.raise_error(
                BarrierTimeoutError(
                    outstanding,
                    batch.total,
                    completed=[s.name for s in batch.completed],
                    failed=[s.name for s in batch.failed],
                )
            )

        for server in batch.failed:
            logger.error("Server %s failed to install.", server.name)
        for server in batch.succeeded:
            logger.info("Server %s was successfully installed.", server.name)
            self.dispatcher.dispatch(server)

        if batch.failed:
            self.raise_error(BatchInstallError([s.name for s in batch.failed], batch.total))
        return batch

    def _start_attached(self, batch: InstallBatch, entry: BatchEntry) -> None:
        server = entry.server

        def on_done(success: bool) -> None:
            self.scheduler.schedule(lambda: batch.record(server, success))

        logger.debug("Starting install of %s (version=%s)", server.name, entry.version or "default")
        try:
            server.install_attached(
                InstallOptions(stdio_sink=self.sink_factory(), requested_version=entry.version),
                on_done,
            )
        except Exception:
            logger.exception("Install of %s could not be started", server.name)
            batch.record(server, False)

    # ── Uninstall ───────────────────────────────────────────────

    def uninstall(self, server_name: str) -> None:
        """Queue a server uninstall and open the status window."""
        result = self.registry.get_server(server_name)
        if isinstance(result, NotFound):
            self.notifier.notify(
                f"Unable to find LSP server {server_name}.\n\n{result.reason}",
                logging.ERROR,
            )
            return

        self.status_window.uninstall_server(result.server)
        self.status_window.open()

    def uninstall_sync(self, server_identifiers: Sequence[str]) -> None:
        """Uninstall servers one after another, stopping at the first error.

        Versions in the identifiers are ignored.

        Raises:
            ResolutionError: An identifier matched no server.
            UninstallError: A server's uninstall failed.
        """
        for raw in server_identifiers:
            name = parse_server_identifier(raw).name
            result = self.registry.get_server(name)
            if isinstance(result, NotFound):
                logger.error(result.reason)
                self.raise_error(ResolutionError(name))

            server = result.server
            try:
                server.uninstall()
            except Exception as e:
                logger.error(str(e))
                self.raise_error(UninstallError(server.name), cause=e)

            self.dispatcher.forget(server.name)
            logger.info("Successfully uninstalled server %s.", server.name)

    def uninstall_all(self, no_confirm: bool = False) -> bool:
        """Delete the whole install root, uninstalling every server.

        Asks for confirmation unless ``no_confirm``; a non-default
        install root needs a second, explicit confirmation.

        Returns:
            True if the servers were uninstalled, False if the user
            aborted.

        Raises:
            FilesystemError: The install root could not be removed.
        """
        root = self.settings.install_root_dir

        if not no_confirm and not self._confirm_uninstall_all(root):
            self.notifier.notify("Uninstalling all servers was aborted.", logging.INFO)
            return False

        logger.info("Uninstalling all servers.")
        if self.filesystem.dir_exists(root):
            try:
                self.filesystem.rmrf(root)
            except OSError as e:
                logger.error(str(e))
                self.raise_error(FilesystemError("Failed to uninstall all servers."), cause=e)
        logger.info("Successfully uninstalled all servers.")

        self.status_window.mark_all_servers_uninstalled()
        self.status_window.open()
        return True

    def _confirm_uninstall_all(self, root: Path) -> bool:
        shown = display_path(root)
        if not self.prompt.confirm(
            f'This will uninstall all servers currently installed at "{shown}". Continue?'
        ):
            return False
        if not self.settings.uses_default_root:
            return self.prompt.confirm(
                f'WARNING: You are using a non-default install_root_dir ("{shown}"). '
                "This command will delete the entire directory. Continue?"
            )
        return True

    # ── Ready events ────────────────────────────────────────────

    def on_server_ready(self, callback: ReadyCallback) -> int:
        """Call ``callback`` for every installed server, now and in future.

        Servers already installed are delivered on the next scheduler
        drain, not during this call.
        """
        return self.dispatcher.register(callback, self.registry.get_installed_servers)

    # ── Misc ────────────────────────────────────────────────────

    def get_install_completion(self) -> list[str]:
        return get_install_completion(self.registry.get_available_server_names(), self.aliases)
