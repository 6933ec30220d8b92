"""Configuration system for treels.

This module defines how callers specify a listing: which display mode to
use, how entries are ordered, which entries are shown and what metadata is
collected. A ListingConfig is built once per invocation and passed
explicitly to every component; it is never mutated afterwards.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import List


class DisplayMode(Enum):
    """Mutually exclusive output layouts."""
    SINGLE_COLUMN = "single"    # One entry per line (-1)
    COLUMNS = "columns"         # Multi-column, sorted down (-C)
    ACROSS = "across"           # Multi-column, sorted across (-x)
    STREAM = "stream"           # Comma separated stream (-m)
    LONG = "long"               # Long format (-l, -n)


class SortKey(Enum):
    """Field the entries are ordered by."""
    NAME = "name"
    SIZE = "size"
    MTIME = "mtime"             # Modification time
    ATIME = "atime"             # Access time
    CTIME = "ctime"             # Status change time


class TimeField(Enum):
    """Timestamp shown in long format and used for time sorting."""
    MODIFICATION = "mtime"
    ACCESS = "atime"
    STATUS = "ctime"

    def sort_key(self) -> SortKey:
        """Return the sort key ordering entries by this timestamp."""
        return {
            TimeField.MODIFICATION: SortKey.MTIME,
            TimeField.ACCESS: SortKey.ATIME,
            TimeField.STATUS: SortKey.CTIME,
        }[self]


class SymlinkMode(Enum):
    """How symbolic links are handled during the walk."""
    PHYSICAL = "physical"       # Report links themselves
    LOGICAL = "logical"         # Follow links (-L)


# Default terminal width when nothing better is known
DEFAULT_TERM_WIDTH = 80

# Block unit used for -s and the long format "total" line
DEFAULT_BLOCK_SIZE = 1024


@dataclass(frozen=True)
class WalkOptions:
    """Options passed through unchanged to the file-tree-walk primitive."""

    physical: bool = True       # lstat instead of stat
    nochdir: bool = True        # Never change the working directory
    seedot: bool = False        # Synthesize "." and ".." entries
    nostat: bool = False        # Skip stat for entries that are not directories
    comfollow: bool = False     # Follow symlinks named as roots

    @property
    def logical(self) -> bool:
        return not self.physical


@dataclass(frozen=True)
class ListingConfig:
    """Complete, immutable configuration for one listing run.

    This is the primary way callers specify what they want listed and
    how. The ListingPlan validates it and resolves the comparator,
    renderer and walk options it implies.
    """

    # Output layout
    display_mode: DisplayMode = DisplayMode.SINGLE_COLUMN
    term_width: int = DEFAULT_TERM_WIDTH

    # Ordering
    sort_key: SortKey = SortKey.NAME
    reverse: bool = False
    no_sort: bool = False                   # Keep directory order (-f)

    # Selection
    show_hidden: bool = False               # List dotfiles (-a, -A)
    see_dot: bool = False                   # Include "." and ".." (-a)
    recursive: bool = False                 # Descend into subdirectories (-R)
    list_directory: bool = False            # List directories themselves (-d)

    # Per-entry fields
    numeric_only: bool = False              # Numeric user and group ids (-n)
    show_inode: bool = False                # Inode numbers (-i)
    show_blocks: bool = False               # Block counts (-s)
    show_flags: bool = False                # File flags column (-o)
    classify: bool = False                  # Type indicator suffix (-F)
    classify_dirs: bool = False             # "/" after directories only (-p)
    nonprint: bool = False                  # Non-printable characters as "?" (-q)
    full_time: bool = False                 # Full timestamps (-T)
    time_field: TimeField = TimeField.MODIFICATION
    block_size: int = DEFAULT_BLOCK_SIZE

    # Walk behaviour
    symlink_mode: SymlinkMode = SymlinkMode.PHYSICAL

    # Recognized but inert options
    whiteout: bool = False                  # -W, no whiteouts on this platform
    compat_group: bool = False              # -g, 4.3BSD compatibility

    @property
    def long_format(self) -> bool:
        return self.display_mode == DisplayMode.LONG

    @property
    def needs_stats(self) -> bool:
        """Whether the aggregation pass must collect metadata widths."""
        return self.show_inode or self.long_format or self.show_blocks

    def walk_options(self) -> WalkOptions:
        """Derive the walk primitive options implied by this config.

        Stat information is skipped unless some display mode or the sort
        key needs it, and symlinks named on the command line are followed
        unless the long format, -d or -F asks to see the links themselves.

        Returns:
            WalkOptions for the FileTreeWalk
        """
        nostat = (
            not self.long_format
            and not self.show_inode
            and not self.show_blocks
            and not self.classify
            and not self.classify_dirs
            and self.sort_key == SortKey.NAME
        )
        comfollow = (
            not self.long_format
            and not self.list_directory
            and not self.classify
        )
        return WalkOptions(
            physical=self.symlink_mode == SymlinkMode.PHYSICAL,
            nochdir=True,
            seedot=self.see_dot,
            nostat=nostat,
            comfollow=comfollow,
        )

    def replace(self, **changes) -> 'ListingConfig':
        """Return a copy of this config with the given fields changed."""
        return replace(self, **changes)

    # Convenience constructors for common configurations

    @classmethod
    def for_terminal(cls, term_width: int = DEFAULT_TERM_WIDTH, **kwargs) -> 'ListingConfig':
        """Create config matching interactive defaults (-Cq).

        Args:
            term_width: Terminal width in columns
            **kwargs: Other ListingConfig fields

        Returns:
            ListingConfig for terminal output
        """
        kwargs.setdefault('display_mode', DisplayMode.COLUMNS)
        kwargs.setdefault('nonprint', True)
        return cls(term_width=term_width, **kwargs)

    @classmethod
    def long_listing(cls, numeric_only: bool = False, **kwargs) -> 'ListingConfig':
        """Create config for the long format (-l, or -n when numeric_only).

        Args:
            numeric_only: Show numeric user and group ids
            **kwargs: Other ListingConfig fields

        Returns:
            ListingConfig for long listings
        """
        return cls(display_mode=DisplayMode.LONG, numeric_only=numeric_only, **kwargs)

    @classmethod
    def recursive_listing(cls, **kwargs) -> 'ListingConfig':
        """Create config for a recursive single-column listing (-1R)."""
        return cls(recursive=True, **kwargs)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.term_width <= 0:
            errors.append("term_width must be positive")

        if self.block_size <= 0:
            errors.append("block_size must be positive")

        if self.see_dot and not self.show_hidden:
            errors.append("see_dot requires show_hidden")

        if not isinstance(self.display_mode, DisplayMode):
            errors.append(f"unknown display mode: {self.display_mode!r}")

        if not isinstance(self.sort_key, SortKey):
            errors.append(f"unknown sort key: {self.sort_key!r}")

        return errors
