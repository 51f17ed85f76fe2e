"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from lsp_installer.adapters.mock import MockServer
from lsp_installer.adapters.registry import ServerRegistry
from lsp_installer.adapters.shell.process import capture_sink
from lsp_installer.core.config.settings import Settings
from lsp_installer.core.engine.scheduler import Scheduler
from lsp_installer.core.services.dispatcher import ReadyDispatcher
from lsp_installer.core.services.server_install.execution.install_queue import InstallQueue
from lsp_installer.core.services.server_install.orchestration.manager import ServerManager
from lsp_installer.ui.cli.status_window import ConsoleStatusWindow


class RecordingPrompt:
    """Prompt double with scripted answers."""

    def __init__(self, confirms: list[bool] | None = None, choice: int = 0) -> None:
        self.confirm_answers = list(confirms or [])
        self.choice = choice
        self.confirm_messages: list[str] = []
        self.choose_calls: list[tuple[str, list[str]]] = []

    def confirm(self, message: str) -> bool:
        self.confirm_messages.append(message)
        return self.confirm_answers.pop(0) if self.confirm_answers else False

    def choose(self, message: str, choices) -> int:
        self.choose_calls.append((message, list(choices)))
        return self.choice


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[str, int]] = []

    def notify(self, message: str, level: int) -> None:
        self.messages.append((message, level))


class FakeFilesystem:
    """Filesystem double; never touches the disk."""

    def __init__(self, existing: set[Path] | None = None, fail_with: OSError | None = None) -> None:
        self.existing = set(existing or ())
        self.fail_with = fail_with
        self.removed: list[Path] = []

    def dir_exists(self, path: Path) -> bool:
        return Path(path) in self.existing

    def rmrf(self, path: Path) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.removed.append(Path(path))
        self.existing.discard(Path(path))


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        install_root_dir=tmp_path / "servers",
        barrier_poll_interval=0.01,
        barrier_timeout=5,
    )


@pytest.fixture
def scheduler() -> Scheduler:
    return Scheduler()


@pytest.fixture
def dispatcher(scheduler: Scheduler) -> ReadyDispatcher:
    return ReadyDispatcher(scheduler)


@pytest.fixture
def prompt() -> RecordingPrompt:
    return RecordingPrompt()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def echoed() -> list[str]:
    return []


@pytest.fixture
def make_manager(settings, scheduler, dispatcher, prompt, notifier, echoed):
    """Factory: ``make_manager(servers, **overrides) -> ServerManager``."""

    def _make(servers: list[MockServer] | None = None, **overrides) -> ServerManager:
        queue = InstallQueue(scheduler, dispatcher, max_concurrent=2)
        kwargs = {
            "prompt": prompt,
            "notifier": notifier,
            "scheduler": scheduler,
            "dispatcher": dispatcher,
            "settings": settings,
            "sink_factory": capture_sink,
        }
        kwargs.update(overrides)
        return ServerManager(
            ServerRegistry(servers or []),
            ConsoleStatusWindow(queue, echo=echoed.append),
            **kwargs,
        )

    return _make
