"""
L4 Execution — ``__init__.py`` re-exports the execution functions.

These functions WRITE to the system: cache sweeps, downloads,
registry and tool status files.
"""

from suiup.core.services.install.execution.cache import (  # noqa: F401
    auto_cleanup_cache,
    get_cache_stats,
    handle_cleanup,
    handle_cleanup_advanced,
    load_cache_policy,
    smart_cleanup,
)
from suiup.core.services.install.execution.registry import InstalledBinaries  # noqa: F401
from suiup.core.services.install.execution.tool_status import (  # noqa: F401
    get_tool_status,
    set_tool_status,
)
