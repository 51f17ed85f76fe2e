"""
L0 Data — static tables shipped with the installer.
"""

from lsp_installer.core.services.server_install.data.language_aliases import (  # noqa: F401
    LANGUAGE_ALIASES,
)
