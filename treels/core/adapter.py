"""Tree walker adapter for treels.

The TreeWalkerAdapter is the seam between the traversal controller and
the file-tree-walk primitive. It opens the walk with the configured
options and the ordering policy as sort callback, and exposes the walk as
a draining iterator of traversal events.
"""

from typing import Callable, Iterator, List, Optional, Sequence

from .node import Entry
from ..config import WalkOptions
from ..errors import WalkOpenError, WalkReadError
from ..adapters.filesystem import FileTreeWalk, SKIP


class TreeWalkerAdapter:
    """Adapter sequencing calls into a file-tree-walk primitive.

    The primitive is created through walk_factory, which takes the root
    paths, the WalkOptions and the sort callback, so tests and embedders
    can substitute their own walk.
    """

    def __init__(self,
                 options: WalkOptions,
                 comparator: Optional[Callable[[Entry, Entry], int]] = None,
                 walk_factory: Callable[..., FileTreeWalk] = FileTreeWalk):
        """Initialize the adapter.

        Args:
            options: Options passed through unchanged to the primitive
            comparator: Sort callback, None for directory order
            walk_factory: Callable creating the primitive
        """
        self.options = options
        self.comparator = comparator
        self.walk_factory = walk_factory
        self._walk = None

    def open(self, paths: Sequence[str]) -> None:
        """Open the walk over the given roots.

        Args:
            paths: Root paths

        Raises:
            WalkOpenError: If the primitive cannot initialize
        """
        if self._walk is not None:
            self.close()
        try:
            self._walk = self.walk_factory(list(paths), self.options, self.comparator)
        except WalkOpenError:
            raise
        except OSError as error:
            name = paths[0] if paths else "walk"
            raise WalkOpenError.from_os_error(name, error) from error

    @property
    def is_open(self) -> bool:
        return self._walk is not None

    def get_children(self, entry: Optional[Entry] = None,
                     names_only: bool = False) -> Optional[List[Entry]]:
        """Get the immediate children of a directory.

        The walk can only list the entry it returned last, so entry is
        the directory event just handed out by events(), or None for the
        root arguments before traversal starts.

        Args:
            entry: Directory entry, or None for the root list
            names_only: Skip stat information for the children

        Returns:
            List of children (possibly empty), or None when the directory
            has no listing
        """
        walk = self._require_walk()
        if entry is not None and not self.supports_names_only():
            names_only = False
        return walk.children(names_only=names_only)

    def events(self) -> Iterator[Entry]:
        """Yield traversal events until the walk is exhausted.

        Raises:
            WalkReadError: If the primitive fails while advancing
        """
        walk = self._require_walk()
        while True:
            entry = walk.read()
            if entry is None:
                return
            yield entry

    def skip(self, entry: Entry) -> None:
        """Do not descend into a directory that was already listed."""
        self._require_walk().set(entry, SKIP)

    def supports_names_only(self) -> bool:
        """Check if children can be listed without stat information."""
        return True

    def close(self) -> None:
        if self._walk is not None:
            self._walk.close()
            self._walk = None

    def __enter__(self) -> 'TreeWalkerAdapter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _require_walk(self):
        if self._walk is None:
            raise WalkReadError("walk", "walk is not open")
        return self._walk

    def __repr__(self) -> str:
        return f"TreeWalkerAdapter(options={self.options!r}, comparator={self.comparator!r})"
