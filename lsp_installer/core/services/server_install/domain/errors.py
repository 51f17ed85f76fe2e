"""
L1 Domain — Installer error taxonomy.

Every fatal outcome of a synchronous call is an ``InstallerError``.
Interactive calls never raise these for a missing server; they notify
the user and return.  A declined alias choice is not an error at all.
"""

from __future__ import annotations

from typing import Any


class InstallerError(Exception):
    """Base class for fatal installer errors."""

    exit_code: int = 1

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ResolutionError(InstallerError):
    """An identifier did not match any known server."""

    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(f'Could not find server "{name}".', **kwargs)
        self.name = name


class BatchInstallError(InstallerError):
    """At least one server of a synchronous batch failed to install."""

    def __init__(self, failed: list[str], total: int, **kwargs: Any) -> None:
        super().__init__(f"{len(failed)}/{total} servers failed to install.", **kwargs)
        self.failed = failed
        self.total = total


class BarrierTimeoutError(InstallerError):
    """The completion barrier gave up before every install reported back.

    ``completed`` and ``failed`` hold what had been reported so far;
    ``outstanding`` names the servers that never reported.
    """

    def __init__(
        self,
        outstanding: list[str],
        total: int,
        *,
        completed: list[str] | None = None,
        failed: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Timed out waiting for {len(outstanding)}/{total} servers to install.",
            **kwargs,
        )
        self.outstanding = outstanding
        self.total = total
        self.completed = completed or []
        self.failed = failed or []


class UninstallError(InstallerError):
    """A server's uninstall operation failed."""

    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(f'Failed to uninstall server "{name}".', **kwargs)
        self.name = name


class FilesystemError(InstallerError):
    """Removing the install root failed."""
