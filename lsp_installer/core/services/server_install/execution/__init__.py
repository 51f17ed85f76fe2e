"""
L4 Execution — batch state, completion barrier, interactive queue.
"""

from lsp_installer.core.services.server_install.execution.barrier import (  # noqa: F401
    wait_for_completion,
)
from lsp_installer.core.services.server_install.execution.batch import (  # noqa: F401
    BatchEntry,
    InstallBatch,
)
from lsp_installer.core.services.server_install.execution.install_queue import (  # noqa: F401
    InstallQueue,
    ServerState,
    ServerStatus,
)
