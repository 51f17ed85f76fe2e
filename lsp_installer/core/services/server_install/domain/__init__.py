"""
L1 Domain — pure types: identifiers, lookup results, errors.
"""

from lsp_installer.core.services.server_install.domain.errors import (  # noqa: F401
    BarrierTimeoutError,
    BatchInstallError,
    FilesystemError,
    InstallerError,
    ResolutionError,
    UninstallError,
)
from lsp_installer.core.services.server_install.domain.identifier import (  # noqa: F401
    ServerIdentifier,
    parse_server_identifier,
)
from lsp_installer.core.services.server_install.domain.lookup import (  # noqa: F401
    Found,
    LookupResult,
    NotFound,
)
