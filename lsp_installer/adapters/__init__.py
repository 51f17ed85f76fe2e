"""
Adapters — concrete collaborators behind the orchestration core.
"""

from lsp_installer.adapters.base import (  # noqa: F401
    Filesystem,
    InstallOptions,
    Notifier,
    Prompt,
    Server,
    ServerRegistryPort,
    StatusWindow,
    StdioSink,
)
from lsp_installer.adapters.mock import MockServer  # noqa: F401
from lsp_installer.adapters.registry import ServerRegistry, build_registry  # noqa: F401

__all__ = [
    "Filesystem",
    "InstallOptions",
    "MockServer",
    "Notifier",
    "Prompt",
    "Server",
    "ServerRegistry",
    "ServerRegistryPort",
    "StatusWindow",
    "StdioSink",
    "build_registry",
]
