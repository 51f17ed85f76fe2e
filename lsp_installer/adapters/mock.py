"""
Mock server — universal test double for the Server protocol.

Configurable to succeed, fail, complete later from another thread, or
never complete at all.  Records every call it receives.
"""

from __future__ import annotations

import threading

from lsp_installer.adapters.base import DoneCallback, InstallOptions


class MockServer:
    """In-memory server for tests and dry runs.

    Args:
        name: Server name.
        installed: Initial installed state.
        succeed: Outcome reported by ``install_attached``.
        delay: If set, the outcome is reported from a timer thread after
            this many seconds instead of inline.
        never_completes: Never call ``on_done`` (for timeout tests).
        uninstall_error: Raised by ``uninstall`` when set.
    """

    def __init__(
        self,
        name: str,
        *,
        installed: bool = False,
        succeed: bool = True,
        delay: float | None = None,
        never_completes: bool = False,
        uninstall_error: Exception | None = None,
    ) -> None:
        self.name = name
        self.installed = installed
        self.succeed = succeed
        self.delay = delay
        self.never_completes = never_completes
        self.uninstall_error = uninstall_error
        self.install_calls: list[InstallOptions] = []
        self.uninstall_calls = 0

    def is_installed(self) -> bool:
        return self.installed

    def install_attached(self, options: InstallOptions, on_done: DoneCallback) -> None:
        self.install_calls.append(options)
        if self.never_completes:
            return
        if self.delay is None:
            self._finish(options, on_done)
            return
        timer = threading.Timer(self.delay, self._finish, args=(options, on_done))
        timer.daemon = True
        timer.start()

    def uninstall(self) -> None:
        self.uninstall_calls += 1
        if self.uninstall_error is not None:
            raise self.uninstall_error
        self.installed = False

    @property
    def install_count(self) -> int:
        return len(self.install_calls)

    def _finish(self, options: InstallOptions, on_done: DoneCallback) -> None:
        version = options.requested_version or "latest"
        if self.succeed:
            options.stdio_sink.stdout(f"[mock] installed {self.name}@{version}\n")
            self.installed = True
        else:
            options.stdio_sink.stderr(f"[mock] failed to install {self.name}@{version}\n")
        on_done(self.succeed)

    def __repr__(self) -> str:
        return f"<MockServer name={self.name!r} installed={self.installed}>"
