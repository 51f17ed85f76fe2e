"""
lsp-installer — CLI entrypoint.

Usage:
    lsp-installer --help
    lsp-installer install pyright tsserver@4.8.4
    lsp-installer install --sync rust_analyzer@nightly
    lsp-installer uninstall-all --yes
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from lsp_installer import __version__
from lsp_installer.core.config.settings import Settings, SettingsError, load_settings
from lsp_installer.core.observability.logging_config import resolve_level, setup_logging
from lsp_installer.core.platform import is_headless
from lsp_installer.core.services.server_install.domain.errors import InstallerError
from lsp_installer.core.services.server_install.execution.install_queue import ServerStatus
from lsp_installer.core.services.server_install.orchestration.manager import ServerManager


def build_manager(
    settings: Settings,
    *,
    headless: bool = False,
    registry: Any = None,
) -> ServerManager:
    """Wire a ServerManager with the CLI's collaborators."""
    from lsp_installer.adapters.registry import build_registry
    from lsp_installer.core.engine.scheduler import Scheduler
    from lsp_installer.core.services.dispatcher import ReadyDispatcher
    from lsp_installer.core.services.server_install.execution.install_queue import InstallQueue
    from lsp_installer.ui.cli.prompt import ClickNotifier, ClickPrompt
    from lsp_installer.ui.cli.status_window import ConsoleStatusWindow

    scheduler = Scheduler()
    dispatcher = ReadyDispatcher(scheduler)
    queue = InstallQueue(
        scheduler, dispatcher, max_concurrent=settings.max_concurrent_installers,
    )
    return ServerManager(
        registry if registry is not None else build_registry(settings),
        ConsoleStatusWindow(queue),
        prompt=ClickPrompt(),
        notifier=ClickNotifier(),
        scheduler=scheduler,
        dispatcher=dispatcher,
        settings=settings,
        headless=headless,
    )


@click.group()
@click.version_option(version=__version__, prog_name="lsp-installer")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to lsp-installer.yml (default: auto-detect).",
)
@click.option(
    "--headless/--interactive",
    default=None,
    help="Force headless mode (default: headless when stdin is not a TTY).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    headless: bool | None,
) -> None:
    """lsp-installer — install and manage language servers."""
    ctx.ensure_object(dict)

    try:
        settings = load_settings(Path(config_path) if config_path else None)
    except SettingsError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)

    setup_logging(
        level=resolve_level(
            debug=debug, verbose=verbose, quiet=quiet, configured=settings.log_level,
        ),
        log_file=os.environ.get("LSPI_LOG_FILE"),
        log_file_level=os.environ.get("LSPI_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )

    ctx.obj["settings"] = settings
    ctx.obj["quiet"] = quiet
    ctx.obj["headless"] = is_headless() if headless is None else headless


def _manager(ctx: click.Context) -> ServerManager:
    obj = ctx.obj
    if obj.get("manager") is None:
        obj["manager"] = build_manager(obj["settings"], headless=obj["headless"])
    return obj["manager"]


def _run(manager: ServerManager, action: Callable[[], Any]) -> Any:
    """Run ``action``; on a fatal error, print it, drain and exit non-zero."""
    try:
        result = action()
    except InstallerError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        # A headless run has a pending SystemExit queued; let it fire.
        manager.scheduler.run_pending()
        sys.exit(e.exit_code)
    manager.scheduler.run_pending()
    return result


def _drain_queue(manager: ServerManager) -> bool:
    """Wait for the interactive queue, then show the final state.

    Returns True if nothing in the queue failed.
    """
    window = manager.status_window
    queue = window.queue
    manager.scheduler.run_until(lambda: queue.is_idle)
    window.render()
    window.close()
    return not any(state.status == ServerStatus.FAILED for state in queue.snapshot())


# ── Install ─────────────────────────────────────────────────────


@cli.command()
@click.argument("identifiers", nargs=-1, required=True)
@click.option("--sync", is_flag=True, help="Install all servers and block until done.")
@click.pass_context
def install(ctx: click.Context, identifiers: tuple[str, ...], sync: bool) -> None:
    """Install servers (NAME or NAME@VERSION, or a language alias)."""
    manager = _manager(ctx)

    if sync or manager.headless:
        batch = _run(manager, lambda: manager.install_sync(list(identifiers)))
        if not ctx.obj.get("quiet"):
            click.secho(f"✅ Installed {batch.total} server(s)", fg="green")
        return

    for identifier in identifiers:
        manager.install(identifier)
    if not _drain_queue(manager):
        sys.exit(1)


# ── Uninstall ───────────────────────────────────────────────────


@cli.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--sync", is_flag=True, help="Uninstall one by one, stopping at the first error.")
@click.pass_context
def uninstall(ctx: click.Context, names: tuple[str, ...], sync: bool) -> None:
    """Uninstall servers."""
    manager = _manager(ctx)

    if sync or manager.headless:
        _run(manager, lambda: manager.uninstall_sync(list(names)))
        if not ctx.obj.get("quiet"):
            click.secho(f"✅ Uninstalled {len(names)} server(s)", fg="green")
        return

    for name in names:
        manager.uninstall(name)
    if not _drain_queue(manager):
        sys.exit(1)


@cli.command("uninstall-all")
@click.option("--yes", "-y", "no_confirm", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def uninstall_all(ctx: click.Context, no_confirm: bool) -> None:
    """Delete the install root and every server in it."""
    manager = _manager(ctx)
    removed = _run(manager, lambda: manager.uninstall_all(no_confirm=no_confirm))
    if removed:
        manager.status_window.close()


# ── Observe ─────────────────────────────────────────────────────


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--installed", "only_installed", is_flag=True, help="Only installed servers.")
@click.pass_context
def list_servers(ctx: click.Context, as_json: bool, only_installed: bool) -> None:
    """List available servers."""
    registry = _manager(ctx).registry
    servers = registry.get_installed_servers() if only_installed else registry.get_available_servers()

    rows = [
        {
            "name": s.name,
            "installed": s.is_installed(),
            "description": getattr(s, "description", ""),
        }
        for s in servers
    ]

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.secho("⚠️  No servers configured", fg="yellow")
        return

    for row in rows:
        icon = "✅" if row["installed"] else "  "
        desc = f"  — {row['description']}" if row["description"] else ""
        click.echo(f"   {icon} {row['name']}{desc}")


@cli.command()
@click.pass_context
def completion(ctx: click.Context) -> None:
    """Print completion candidates for ``install``."""
    for candidate in _manager(ctx).get_install_completion():
        click.echo(candidate)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
