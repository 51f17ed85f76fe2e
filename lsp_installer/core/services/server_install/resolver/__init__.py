"""
L2 Resolver — turns what the user typed into concrete server names.
"""

from lsp_installer.core.services.server_install.resolver.alias_resolution import (  # noqa: F401
    get_install_completion,
    resolve_alias,
)
