"""
lsp-installer — install, uninstall and track language server packages.
"""

__version__ = "0.1.0"
