"""
Server installation service — package re-exports.

Layers, innermost first (data → domain → resolver → execution →
orchestration)::

    from lsp_installer.core.services.server_install import ServerManager
"""

# ── L0: Data ──
from lsp_installer.core.services.server_install.data.language_aliases import (  # noqa: F401
    LANGUAGE_ALIASES,
)

# ── L1: Domain ──
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
    NotFound,
)

# ── L2: Resolver ──
from lsp_installer.core.services.server_install.resolver.alias_resolution import (  # noqa: F401
    get_install_completion,
    resolve_alias,
)

# ── L4: Execution ──
from lsp_installer.core.services.server_install.execution.barrier import (  # noqa: F401
    wait_for_completion,
)
from lsp_installer.core.services.server_install.execution.batch import (  # noqa: F401
    InstallBatch,
)
from lsp_installer.core.services.server_install.execution.install_queue import (  # noqa: F401
    InstallQueue,
    ServerStatus,
)

# ── L5: Orchestration ──
from lsp_installer.core.services.server_install.orchestration.manager import (  # noqa: F401
    ServerManager,
)
