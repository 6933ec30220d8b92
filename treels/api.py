"""High-level API for treels.

This module provides simple, functional interfaces for common listing
operations. These functions wrap the plan and controller objects for ease
of use in simple cases.
"""

import io
import sys
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, TextIO

from .config import ListingConfig
from .error_policies import CollectErrorsPolicy, ErrorPolicy, ReportErrorsPolicy
from .errors import WalkOpenError, WalkReadError
from .planning import ListingPlan

# Listed when no path is given
DEFAULT_PATHS = ('.',)


@dataclass
class ListingResult:
    """Captured outcome of a listing."""
    output: str
    errors: List[str] = field(default_factory=list)
    exit_status: int = 0


def list_paths(
    paths: Optional[Iterable[str]] = None,
    config: Optional[ListingConfig] = None,
    stream: Optional[TextIO] = None,
    error_stream: Optional[TextIO] = None,
    error_policy: Optional[ErrorPolicy] = None,
    **kwargs
) -> int:
    """List paths and return the exit status.

    This is the primary high-level function. It validates the
    configuration, runs the traversal and turns fatal walk errors into a
    failing status.

    Args:
        paths: Root paths, the current directory when empty
        config: Listing configuration, ListingConfig() when None
        stream: Output stream, sys.stdout when None
        error_stream: Error stream for the default error policy
        error_policy: Error policy, ReportErrorsPolicy when None
        **kwargs: ListingConfig fields overriding config

    Returns:
        0 on success, 1 if any error was reported

    Raises:
        ConfigurationError: If the configuration is inconsistent

    Example:
        >>> list_paths(["/tmp"], ListingConfig.long_listing())
        0
    """
    config = config or ListingConfig()
    if kwargs:
        config = config.replace(**kwargs)

    paths = list(paths) if paths else list(DEFAULT_PATHS)
    policy = error_policy or ReportErrorsPolicy(error_stream)

    plan = ListingPlan(config, policy)
    controller = plan.create_controller(stream if stream is not None else sys.stdout)

    try:
        state = controller.run(paths)
    except (WalkOpenError, WalkReadError) as error:
        policy.report_fatal(error)
        return 1

    return state.exit_status


def format_listing(
    paths: Optional[Iterable[str]] = None,
    config: Optional[ListingConfig] = None,
    **kwargs
) -> ListingResult:
    """List paths into a string instead of a stream.

    Errors are collected rather than written.

    Args:
        paths: Root paths, the current directory when empty
        config: Listing configuration
        **kwargs: ListingConfig fields overriding config

    Returns:
        ListingResult with the output text, error lines and exit status

    Example:
        >>> result = format_listing(["src"], recursive=True)
        >>> print(result.output)
    """
    buffer = io.StringIO()
    policy = CollectErrorsPolicy()
    status = list_paths(paths, config, stream=buffer, error_policy=policy, **kwargs)
    return ListingResult(
        output=buffer.getvalue(),
        errors=policy.lines,
        exit_status=status,
    )
