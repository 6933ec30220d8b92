"""treels - directory listing built on a file tree walk.

treels lists files and directories the way ``ls`` does: root arguments
are grouped into an initial batch, each directory is listed as its own
section, and the whole run is driven by a single traversal.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from treels import list_paths, ListingConfig

    list_paths(["src"], ListingConfig.long_listing())
━━━━━━━━━━━━━━━━━━━━━━━━━━

Components can also be wired by hand through ListingPlan when a
different walk primitive, name lookup or error policy is needed.
"""

__version__ = "0.1.0"

from .config import (
    DisplayMode,
    ListingConfig,
    SortKey,
    SymlinkMode,
    TimeField,
    WalkOptions,
)
from .errors import (
    AllocationError,
    ConfigurationError,
    CycleError,
    ListingError,
    NodeError,
    WalkOpenError,
    WalkReadError,
)
from .error_policies import (
    CollectErrorsPolicy,
    ErrorPolicy,
    FailFastPolicy,
    ReportErrorsPolicy,
    create_policy,
)
from .planning import ListingPlan
from .api import ListingResult, format_listing, list_paths

__all__ = [
    "__version__",
    # Configuration
    "DisplayMode",
    "ListingConfig",
    "SortKey",
    "SymlinkMode",
    "TimeField",
    "WalkOptions",
    # Errors
    "AllocationError",
    "ConfigurationError",
    "CycleError",
    "ListingError",
    "NodeError",
    "WalkOpenError",
    "WalkReadError",
    # Error policies
    "CollectErrorsPolicy",
    "ErrorPolicy",
    "FailFastPolicy",
    "ReportErrorsPolicy",
    "create_policy",
    # Execution
    "ListingPlan",
    "ListingResult",
    "format_listing",
    "list_paths",
]
