"""File-tree-walk primitive for treels.

FileTreeWalk walks one or more root paths depth first. Each call to read()
returns the next entry with an EntryInfo describing the event; the caller
can fetch the children of the directory it was just handed and tell the
walk not to descend into it.
"""

import errno as errno_codes
import os
import stat
from typing import Callable, Iterator, List, Optional, Sequence

from ..config import WalkOptions
from ..core.node import Entry, EntryInfo, ROOT_LEVEL
from ..core.compare import sort_entries
from ..errors import WalkOpenError, WalkReadError

# Instructions accepted by FileTreeWalk.set()
SKIP = "skip"


class FileTreeWalk:
    """Depth-first walk over a set of root paths.

    Directories are reported twice: as EntryInfo.D before their children
    and as EntryInfo.DP after them. A directory that cannot be listed is
    reported a second time as EntryInfo.DNR instead.
    """

    def __init__(self,
                 paths: Sequence[str],
                 options: Optional[WalkOptions] = None,
                 compare: Optional[Callable[[Entry, Entry], int]] = None):
        """Open the walk.

        Args:
            paths: Root paths, in the order given by the caller
            options: WalkOptions, defaults to a physical walk
            compare: Sort callback for every sibling list, None keeps
                directory order

        Raises:
            WalkOpenError: If no paths were given or a path is empty
        """
        if not paths:
            raise WalkOpenError("walk", os.strerror(errno_codes.EINVAL), errno_codes.EINVAL)
        for path in paths:
            if not path:
                raise WalkOpenError.from_errno("''", errno_codes.ENOENT)

        self.options = options or WalkOptions()
        self.compare = compare
        follow = self.options.comfollow or self.options.logical
        self._roots = sort_entries(
            [self._make_root(path, follow) for path in paths], compare
        )
        self._events = self._walk()
        self._current: Optional[Entry] = None
        self._started = False
        self._closed = False
        # (directory, children, names_only) from the last children() call
        self._child_cache = None

    # Public interface

    def read(self) -> Optional[Entry]:
        """Return the next entry of the walk, or None when it is exhausted.

        Raises:
            WalkReadError: If the walk itself fails
        """
        if self._closed:
            raise WalkReadError("walk", "read from a closed walk")
        try:
            entry = next(self._events)
        except StopIteration:
            self._current = None
            return None
        except OSError as error:
            raise WalkReadError.from_os_error("walk", error) from error
        self._current = entry
        return entry

    def children(self, names_only: bool = False) -> Optional[List[Entry]]:
        """Return the children of the entry read last.

        Before the first read() this is the sorted list of roots.

        Args:
            names_only: Skip stat for every child

        Returns:
            Sorted list of children (possibly empty), or None if the last
            entry is not a directory or cannot be listed
        """
        if not self._started:
            return list(self._roots)

        current = self._current
        if current is None or current.info is not EntryInfo.D:
            return None

        try:
            listing = self._read_dir(current, names_only)
        except OSError:
            # Reported as DNR when the walk tries to descend
            self._child_cache = None
            return None

        self._child_cache = (current, listing, names_only)
        return list(listing)

    def set(self, entry: Entry, instruction: str) -> None:
        """Attach an instruction to an entry.

        Args:
            entry: Entry returned by read()
            instruction: SKIP to avoid descending into a directory

        Raises:
            ValueError: If the instruction is not recognized
        """
        if instruction != SKIP:
            raise ValueError(f"Unknown walk instruction: {instruction!r}")
        entry.instruction = instruction

    def close(self) -> None:
        """Stop the walk and release its state."""
        if not self._closed:
            self._events.close()
            self._child_cache = None
            self._closed = True

    def __enter__(self) -> 'FileTreeWalk':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Traversal

    def _walk(self) -> Iterator[Entry]:
        self._started = True
        for root in self._roots:
            yield from self._visit(root)

    def _visit(self, entry: Entry) -> Iterator[Entry]:
        yield entry

        if entry.info is not EntryInfo.D:
            return

        if entry.instruction == SKIP:
            self._child_cache = None
            entry.info = EntryInfo.DP
            yield entry
            return

        children = self._take_cached(entry)
        if children is None:
            try:
                children = self._read_dir(entry, names_only=False)
            except OSError as error:
                entry.info = EntryInfo.DNR
                entry.errno = error.errno or 0
                yield entry
                return

        for child in children:
            yield from self._visit(child)

        entry.info = EntryInfo.DP
        yield entry

    def _take_cached(self, entry: Entry) -> Optional[List[Entry]]:
        cached = self._child_cache
        self._child_cache = None
        if cached is None:
            return None
        directory, listing, names_only = cached
        if directory is not entry or names_only:
            return None
        return listing

    # Building entries

    def _read_dir(self, parent: Entry, names_only: bool) -> List[Entry]:
        """List a directory into sorted child entries.

        Raises:
            OSError: If the directory cannot be opened or read
        """
        entries = []
        with os.scandir(parent.accpath) as it:
            for dirent in it:
                entries.append(self._make_child(parent, dirent, names_only))

        if self.options.seedot:
            entries = [
                self._make_dot(parent, '.', names_only),
                self._make_dot(parent, '..', names_only),
            ] + entries

        return sort_entries(entries, self.compare)

    def _make_root(self, path: str, follow: bool) -> Entry:
        entry = Entry(path, path, level=ROOT_LEVEL)
        self._stat_entry(entry, follow)
        return entry

    def _make_child(self, parent: Entry, dirent: os.DirEntry, names_only: bool) -> Entry:
        entry = Entry(
            dirent.name,
            os.path.join(parent.path, dirent.name),
            level=parent.level + 1,
            parent=parent,
            accpath=os.path.join(parent.accpath, dirent.name),
        )

        try:
            entry.d_type_dir = dirent.is_dir(follow_symlinks=self.options.logical)
        except OSError:
            entry.d_type_dir = False

        if names_only or (self.options.nostat and not entry.d_type_dir):
            entry.info = EntryInfo.NSOK
            return entry

        self._stat_entry(entry, follow=self.options.logical)
        return entry

    def _make_dot(self, parent: Entry, name: str, names_only: bool) -> Entry:
        entry = Entry(
            name,
            os.path.join(parent.path, name),
            level=parent.level + 1,
            parent=parent,
            accpath=os.path.join(parent.accpath, name),
        )
        entry.d_type_dir = True
        if names_only:
            entry.info = EntryInfo.NSOK
            return entry

        self._stat_entry(entry, follow=True)
        if entry.info is not EntryInfo.NS:
            entry.info = EntryInfo.DOT
        return entry

    def _stat_entry(self, entry: Entry, follow: bool) -> None:
        """Fill in stat metadata and classify the entry."""
        try:
            st = os.stat(entry.accpath) if follow else os.lstat(entry.accpath)
        except OSError as error:
            if follow and self._dangling_link(entry):
                return
            entry.stat = None
            entry.info = EntryInfo.NS
            entry.errno = error.errno or 0
            return

        entry.stat = st
        entry.info = self._classify(entry, st)

    def _dangling_link(self, entry: Entry) -> bool:
        try:
            st = os.lstat(entry.accpath)
        except OSError:
            return False
        if not stat.S_ISLNK(st.st_mode):
            return False
        entry.stat = st
        entry.info = EntryInfo.SLNONE
        return True

    def _classify(self, entry: Entry, st: os.stat_result) -> EntryInfo:
        mode = st.st_mode
        if stat.S_ISDIR(mode):
            if self._is_cycle(entry, st):
                return EntryInfo.DC
            return EntryInfo.D
        if stat.S_ISLNK(mode):
            return EntryInfo.SL
        if stat.S_ISREG(mode):
            return EntryInfo.F
        return EntryInfo.DEFAULT

    @staticmethod
    def _is_cycle(entry: Entry, st: os.stat_result) -> bool:
        """Check whether a directory is one of its own ancestors."""
        ancestor = entry.parent
        while ancestor is not None:
            ast = ancestor.stat
            if ast is not None and ast.st_ino == st.st_ino and ast.st_dev == st.st_dev:
                return True
            ancestor = ancestor.parent
        return False

    def __repr__(self) -> str:
        return f"FileTreeWalk(roots={[r.path for r in self._roots]!r}, options={self.options!r})"
