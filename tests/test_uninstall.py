"""
Tests for uninstall, uninstall_sync and uninstall_all.
"""

import logging

import pytest

from conftest import FakeFilesystem, RecordingPrompt
from lsp_installer.adapters.mock import MockServer
from lsp_installer.core.config.settings import DEFAULT_SETTINGS
from lsp_installer.core.services.server_install.domain.errors import (
    FilesystemError,
    ResolutionError,
    UninstallError,
)
from lsp_installer.core.services.server_install.execution.install_queue import ServerStatus


# ── uninstall_sync ───────────────────────────────────────────────────


class TestUninstallSync:
    def test_uninstalls_in_order(self, make_manager, caplog):
        a = MockServer("a", installed=True)
        b = MockServer("b", installed=True)
        manager = make_manager([a, b])

        with caplog.at_level(logging.INFO):
            manager.uninstall_sync(["a", "b@1.0"])

        assert not a.installed and not b.installed
        messages = [r.getMessage() for r in caplog.records]
        assert messages.index("Successfully uninstalled server a.") < messages.index(
            "Successfully uninstalled server b."
        )

    def test_unknown_name_stops_before_later_servers(self, make_manager):
        a, b = MockServer("a", installed=True), MockServer("b", installed=True)
        manager = make_manager([a, b])

        with pytest.raises(ResolutionError):
            manager.uninstall_sync(["a", "ghost", "b"])

        assert a.uninstall_calls == 1
        assert b.uninstall_calls == 0

    def test_failure_raises_uninstall_error(self, make_manager, caplog):
        broken = MockServer("broken", installed=True, uninstall_error=PermissionError("denied"))
        after = MockServer("after", installed=True)
        manager = make_manager([broken, after])

        with caplog.at_level(logging.ERROR):
            with pytest.raises(UninstallError, match='Failed to uninstall server "broken"') as exc:
                manager.uninstall_sync(["broken", "after"])

        assert isinstance(exc.value.__cause__, PermissionError)
        assert "denied" in caplog.text
        assert after.uninstall_calls == 0

    def test_headless_failure_schedules_exit(self, make_manager, scheduler):
        manager = make_manager(
            [MockServer("x", uninstall_error=RuntimeError("boom"))], headless=True,
        )
        with pytest.raises(UninstallError):
            manager.uninstall_sync(["x"])
        with pytest.raises(SystemExit):
            scheduler.run_pending()

    def test_reinstall_fires_ready_again(self, make_manager, scheduler):
        server = MockServer("gopls")
        manager = make_manager([server])
        seen = []
        manager.on_server_ready(seen.append)
        scheduler.run_pending()

        manager.install_sync(["gopls"])
        manager.uninstall_sync(["gopls"])
        manager.install_sync(["gopls"])

        assert [s.name for s in seen] == ["gopls", "gopls"]


# ── uninstall (interactive) ──────────────────────────────────────────


class TestUninstall:
    def test_queues_uninstall(self, make_manager, scheduler):
        server = MockServer("gopls", installed=True)
        manager = make_manager([server])

        manager.uninstall("gopls")

        window = manager.status_window
        assert window.is_open
        assert window.queue.states["gopls"].status == ServerStatus.UNINSTALLING

        scheduler.run_pending()
        assert window.queue.states["gopls"].status == ServerStatus.UNINSTALLED
        assert not server.installed

    def test_failed_uninstall_marks_state(self, make_manager, scheduler):
        manager = make_manager([MockServer("x", uninstall_error=OSError("busy"))])

        manager.uninstall("x")
        scheduler.run_pending()

        state = manager.status_window.queue.states["x"]
        assert state.status == ServerStatus.FAILED
        assert state.error == "busy"

    def test_unknown_notifies(self, make_manager, notifier):
        manager = make_manager([])
        manager.uninstall("ghost")
        assert notifier.messages[0][0].startswith("Unable to find LSP server ghost.")
        assert notifier.messages[0][1] == logging.ERROR


# ── uninstall_all ────────────────────────────────────────────────────


@pytest.fixture
def default_root_settings(settings):
    return settings.merged(install_root_dir=DEFAULT_SETTINGS.install_root_dir)


class TestUninstallAll:
    def test_default_root_needs_one_confirmation(self, make_manager, default_root_settings):
        root = default_root_settings.install_root_dir
        fs = FakeFilesystem({root})
        prompt = RecordingPrompt(confirms=[True])
        manager = make_manager([], settings=default_root_settings, filesystem=fs, prompt=prompt)

        assert manager.uninstall_all() is True

        assert len(prompt.confirm_messages) == 1
        assert "This will uninstall all servers" in prompt.confirm_messages[0]
        assert fs.removed == [root]

    def test_non_default_root_needs_two_confirmations(self, make_manager, settings):
        root = settings.install_root_dir
        fs = FakeFilesystem({root})
        prompt = RecordingPrompt(confirms=[True, True])
        manager = make_manager([], filesystem=fs, prompt=prompt)

        assert manager.uninstall_all() is True

        assert len(prompt.confirm_messages) == 2
        assert prompt.confirm_messages[1].startswith("WARNING")
        assert fs.removed == [root]

    @pytest.mark.parametrize("answers", [[False], [True, False]])
    def test_declining_either_confirmation_aborts(self, make_manager, settings, notifier, answers):
        fs = FakeFilesystem({settings.install_root_dir})
        manager = make_manager([], filesystem=fs, prompt=RecordingPrompt(confirms=answers))

        assert manager.uninstall_all() is False

        assert fs.removed == []
        assert notifier.messages == [("Uninstalling all servers was aborted.", logging.INFO)]
        assert not manager.status_window.is_open

    def test_no_confirm_skips_prompts(self, make_manager, settings, prompt):
        fs = FakeFilesystem({settings.install_root_dir})
        manager = make_manager([], filesystem=fs)

        assert manager.uninstall_all(no_confirm=True) is True
        assert prompt.confirm_messages == []
        assert fs.removed == [settings.install_root_dir]

    def test_missing_root_is_not_an_error(self, make_manager, caplog):
        fs = FakeFilesystem()
        manager = make_manager([], filesystem=fs)

        with caplog.at_level(logging.INFO):
            assert manager.uninstall_all(no_confirm=True) is True

        assert fs.removed == []
        assert "Successfully uninstalled all servers." in caplog.text

    def test_removal_failure(self, make_manager, settings):
        fs = FakeFilesystem({settings.install_root_dir}, fail_with=PermissionError("nope"))
        manager = make_manager([], filesystem=fs)

        with pytest.raises(FilesystemError, match="Failed to uninstall all servers."):
            manager.uninstall_all(no_confirm=True)

        assert not manager.status_window.is_open

    def test_marks_everything_uninstalled(self, make_manager, settings, scheduler, dispatcher):
        server = MockServer("gopls")
        manager = make_manager([server], filesystem=FakeFilesystem({settings.install_root_dir}))
        manager.install("gopls")
        scheduler.run_until(lambda: manager.status_window.queue.is_idle, timeout=2)
        manager.status_window.close()

        manager.uninstall_all(no_confirm=True)

        assert manager.status_window.is_open
        assert manager.status_window.queue.states["gopls"].status == ServerStatus.UNINSTALLED

    def test_removes_real_directory(self, make_manager, settings):
        root = settings.install_root_dir
        (root / "gopls").mkdir(parents=True)
        (root / "gopls" / "bin").write_text("x")
        manager = make_manager([])

        manager.uninstall_all(no_confirm=True)

        assert not root.exists()
