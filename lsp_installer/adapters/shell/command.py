"""
Command-backed server — installs by running an argv in its own directory.

Each server owns ``<install_root>/<name>``.  Installing runs the
configured command inside a fresh staging directory on a worker thread,
then moves the result into place; a failed install leaves nothing
behind.  Uninstalling removes the directory.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor
from pathlib import Path

from lsp_installer.adapters.base import DoneCallback, InstallOptions
from lsp_installer.adapters.shell.filesystem import LocalFilesystem
from lsp_installer.adapters.shell.process import run_process

logger = logging.getLogger(__name__)

_STAGING_SUFFIX = ".staging"


class CommandServer:
    """A server installed by a single command.

    Args:
        name: Server name.
        install_root: Directory holding all servers.
        install_cmd: Argv; ``{version}`` and ``{install_dir}`` are substituted.
        executor: Pool the install runs on.
        default_version: Used when no version is requested.
        description: Shown by ``list``.
        timeout: Seconds before the install command is killed.
    """

    def __init__(
        self,
        name: str,
        install_root: Path,
        install_cmd: list[str],
        executor: Executor,
        *,
        default_version: str | None = None,
        description: str = "",
        timeout: float | None = None,
    ) -> None:
        self.name = name
        self.install_root = Path(install_root)
        self.install_cmd = list(install_cmd)
        self.default_version = default_version
        self.description = description
        self.timeout = timeout
        self._executor = executor
        self._fs = LocalFilesystem()
        self._lock = threading.Lock()

    @property
    def root_dir(self) -> Path:
        return self.install_root / self.name

    def is_installed(self) -> bool:
        return self._fs.dir_exists(self.root_dir)

    def install_attached(self, options: InstallOptions, on_done: DoneCallback) -> None:
        self._executor.submit(self._install, options, on_done)

    def uninstall(self) -> None:
        with self._lock:
            self._fs.rmrf(self.root_dir)
        logger.info("Removed %s", self.root_dir)

    def render_command(self, version: str | None, install_dir: Path) -> list[str]:
        tokens = {"version": version or "", "install_dir": str(install_dir)}
        rendered = []
        for arg in self.install_cmd:
            for key, value in tokens.items():
                arg = arg.replace(f"{{{key}}}", value)
            rendered.append(arg)
        return rendered

    def _install(self, options: InstallOptions, on_done: DoneCallback) -> None:
        version = options.requested_version or self.default_version
        staging = self.install_root / f"{self.name}{_STAGING_SUFFIX}"
        ok = False
        try:
            with self._lock:
                self._fs.rmrf(staging)
                staging.mkdir(parents=True)
                cmd = self.render_command(version, staging)
                env = {"SERVER_NAME": self.name, "SERVER_INSTALL_DIR": str(staging)}
                if version:
                    env["SERVER_VERSION"] = version
                ok = run_process(
                    cmd,
                    options.stdio_sink,
                    cwd=staging,
                    env_overrides=env,
                    timeout=self.timeout,
                )
                if ok:
                    self._fs.rmrf(self.root_dir)
                    staging.rename(self.root_dir)
                else:
                    self._fs.rmrf(staging)
        except OSError as e:
            logger.error("Install of %s failed: %s", self.name, e)
            options.stdio_sink.stderr(f"{e}\n")
            ok = False
        finally:
            on_done(ok)

    def __repr__(self) -> str:
        return f"<CommandServer name={self.name!r}>"
