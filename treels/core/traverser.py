"""Traversal controller for treels.

The controller drives one listing: it renders the root arguments, then
consumes the walk's event stream, printing a section for every directory
it enters and reporting the error events. It owns the only run-wide
state, the "something was printed" flag used to separate sections.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, TextIO

from .adapter import TreeWalkerAdapter
from .collector import DisplayCollector
from .node import Entry, EntryInfo
from ..config import ListingConfig
from ..display.renderers import Renderer
from ..error_policies import ErrorPolicy
from ..errors import AllocationError, CycleError, ListingError, NodeError


@dataclass
class RunState:
    """Run-wide state, updated strictly in sequence by the controller."""
    root_count: int = 0
    output: bool = False        # Something has been printed
    failed: bool = False        # Some error was reported
    sections: int = 0           # Directory sections rendered

    @property
    def exit_status(self) -> int:
        return 1 if self.failed else 0


class TraversalController:
    """State machine over the traversal events of one walk."""

    def __init__(self,
                 config: ListingConfig,
                 adapter: TreeWalkerAdapter,
                 collector: DisplayCollector,
                 renderer: Renderer,
                 error_policy: ErrorPolicy,
                 stream: TextIO):
        """Initialize the controller.

        Args:
            config: Listing configuration
            adapter: Walker adapter, not yet opened
            collector: Selection and aggregation pass
            renderer: Renderer chosen for the display mode
            error_policy: Where non-fatal errors are reported
            stream: Output stream for listings
        """
        self.config = config
        self.adapter = adapter
        self.collector = collector
        self.renderer = renderer
        self.error_policy = error_policy
        self.stream = stream
        self.state = RunState()

    def run(self, paths: Sequence[str]) -> RunState:
        """List the given root paths.

        Args:
            paths: Root arguments, at least one

        Returns:
            RunState of the finished run

        Raises:
            WalkOpenError: If the walk cannot be opened
            WalkReadError: If the walk fails while advancing
        """
        self.state = RunState(root_count=len(paths))
        self.adapter.open(paths)
        try:
            self._display(None, self.adapter.get_children(None))
            if self.config.list_directory:
                return self._finish()

            # Not recursing and no stat needed: names are enough
            names_only = not self.config.recursive and self.adapter.options.nostat

            for entry in self.adapter.events():
                info = entry.info
                if info is EntryInfo.D:
                    self._enter_directory(entry, names_only)
                elif info is EntryInfo.DC:
                    self._report(CycleError(entry.name))
                elif info in (EntryInfo.DNR, EntryInfo.ERR):
                    self._report(NodeError.from_errno(entry.name, entry.errno))
        finally:
            self.adapter.close()

        return self._finish()

    def _enter_directory(self, entry: Entry, names_only: bool) -> None:
        if entry.is_hidden and not entry.is_root and not self.config.show_hidden:
            self.adapter.skip(entry)
            return

        children = self.adapter.get_children(entry, names_only=names_only)
        self._display(entry, children, header=self._header(entry))

        if not self.config.recursive and children:
            self.adapter.skip(entry)

    def _header(self, entry: Entry) -> Optional[str]:
        """Header for a directory section, None when none is printed."""
        if self.state.output:
            return f"\n{entry.path}:\n"
        if self.state.root_count > 1:
            return f"{entry.path}:\n"
        return None

    def _display(self, parent: Optional[Entry], children, header: Optional[str] = None) -> None:
        try:
            descriptor = self.collector.collect(parent, children)
        except AllocationError as error:
            self._report(error)
            return

        if descriptor is None:
            return

        if header:
            self.stream.write(header)

        # Annotations are released on every exit path
        with descriptor:
            self.renderer.render(descriptor, self.stream)

        self.state.output = True
        if parent is not None:
            self.state.sections += 1

    def _report(self, error: ListingError) -> None:
        self.state.failed = True
        self.error_policy.handle(error)

    def _finish(self) -> RunState:
        if self.error_policy.failed:
            self.state.failed = True
        return self.state
