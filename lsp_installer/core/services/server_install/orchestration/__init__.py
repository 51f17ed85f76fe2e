"""
L5 Orchestration — the coordinator external code calls.
"""

from lsp_installer.core.services.server_install.orchestration.manager import (  # noqa: F401
    ServerManager,
    display_path,
)
