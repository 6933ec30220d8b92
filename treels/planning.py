"""Execution planning for treels.

The ListingPlan validates a ListingConfig once per invocation and resolves
everything it implies: the ordering policy, the renderer, the walk
options and the aggregation pass. The components are then wired into a
TraversalController for each run.
"""

from typing import Any, Callable, Dict, Optional, TextIO

from .config import ListingConfig
from .core.adapter import TreeWalkerAdapter
from .core.collector import DisplayCollector
from .core.compare import MasterComparator
from .core.traverser import TraversalController
from .display.renderers import Renderer, create_renderer
from .error_policies import ErrorPolicy, ReportErrorsPolicy
from .errors import ConfigurationError
from .lookups import NameLookup
from .adapters.filesystem import FileTreeWalk


class ListingPlan:
    """Validated plan for one listing.

    The plan is the bridge between the configuration and execution: it
    checks the configuration before any filesystem operation happens and
    selects the concrete strategy objects the configuration names.
    """

    def __init__(self,
                 config: ListingConfig,
                 error_policy: Optional[ErrorPolicy] = None,
                 lookup: Optional[NameLookup] = None,
                 walk_factory: Callable[..., FileTreeWalk] = FileTreeWalk):
        """Create and validate a listing plan.

        Args:
            config: Listing configuration
            error_policy: Error policy, ReportErrorsPolicy on stderr if None
            lookup: User and group lookup, built from config if None
            walk_factory: Callable creating the walk primitive

        Raises:
            ConfigurationError: If the configuration is inconsistent
        """
        config_errors = config.validate()
        if config_errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        self.config = config
        self.error_policy = error_policy or ReportErrorsPolicy()
        self.lookup = lookup or NameLookup(numeric_only=config.numeric_only)
        self.walk_factory = walk_factory

        # Select components
        self.walk_options = config.walk_options()
        self.comparator = self._select_comparator()
        self.renderer = self._select_renderer()
        self.collector = self._select_collector()

    def _select_comparator(self) -> Optional[MasterComparator]:
        """Select the ordering policy, None when sorting is disabled."""
        if self.config.no_sort:
            return None
        return MasterComparator.from_config(self.config)

    def _select_renderer(self) -> Renderer:
        return create_renderer(self.config)

    def _select_collector(self) -> DisplayCollector:
        return DisplayCollector(self.config, self.error_policy, self.lookup)

    def create_adapter(self) -> TreeWalkerAdapter:
        """Create a walker adapter for one run."""
        return TreeWalkerAdapter(self.walk_options, self.comparator, self.walk_factory)

    def create_controller(self, stream: TextIO) -> TraversalController:
        """Wire the plan's components into a traversal controller.

        Args:
            stream: Output stream for listings

        Returns:
            TraversalController ready to run
        """
        return TraversalController(
            self.config,
            self.create_adapter(),
            self.collector,
            self.renderer,
            self.error_policy,
            stream,
        )

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of the plan.

        Returns:
            Dictionary with plan details
        """
        return {
            'display_mode': self.config.display_mode.value,
            'sort_key': None if self.config.no_sort else self.config.sort_key.value,
            'reverse': self.config.reverse,
            'recursive': self.config.recursive,
            'list_directory': self.config.list_directory,
            'needs_stats': self.config.needs_stats,
            'nostat': self.walk_options.nostat,
            'comfollow': self.walk_options.comfollow,
            'physical': self.walk_options.physical,
            'renderer': self.renderer.__class__.__name__,
            'comparator': repr(self.comparator),
            'error_policy': self.error_policy.__class__.__name__,
        }
