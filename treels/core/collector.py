"""Selection and aggregation pass for treels.

Before a single line of a directory can be printed, the renderers need to
know which entries are shown and how wide every column gets. The
DisplayCollector filters one sibling list, reports the entries that carry
errors, and measures the survivors into a DisplayDescriptor.
"""

import stat
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .node import Entry, EntryInfo
from ..config import ListingConfig
from ..error_policies import ErrorPolicy
from ..errors import AllocationError, NodeError
from ..lookups import NameLookup

# stat reports blocks in units of this many bytes
STAT_BLOCK_BYTES = 512

# Flags column placeholder; this platform has no file flags to show
NO_FLAGS = "-"


@dataclass
class EntryAnnotation:
    """Resolved owner, group and flags for one entry in long format."""
    user: str
    group: str
    flags: Optional[str] = None


@dataclass
class DisplayDescriptor:
    """Aggregated summary of one directory's entries.

    The width fields are character counts and only hold values when
    metadata-dependent modes are active. Annotations live in a side table
    keyed by entry index and are cleared when the descriptor's ``with``
    block exits.
    """
    entries: List[Entry]
    visible: List[bool]
    parent: Optional[Entry] = None
    count: int = 0
    maxlen: int = 0
    needs_stats: bool = False
    btotal: int = 0
    bcfile: bool = False
    s_block: int = 0
    s_inode: int = 0
    s_nlink: int = 0
    s_size: int = 0
    s_user: int = 0
    s_group: int = 0
    s_flags: int = 0
    annotations: Dict[int, EntryAnnotation] = field(default_factory=dict)

    @property
    def is_root_list(self) -> bool:
        """True when the entries are root arguments, not directory contents."""
        return self.parent is None

    def visible_entries(self) -> List[Entry]:
        """Return the entries that are printed, in order."""
        return [entry for entry, shown in zip(self.entries, self.visible) if shown]

    def iter_visible(self) -> Iterator[Tuple[Entry, Optional[EntryAnnotation]]]:
        """Yield (entry, annotation) pairs for printed entries."""
        for index, (entry, shown) in enumerate(zip(self.entries, self.visible)):
            if shown:
                yield entry, self.annotations.get(index)

    def release(self) -> None:
        """Drop the per-entry rendering annotations."""
        self.annotations.clear()

    def __enter__(self) -> 'DisplayDescriptor':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()


def allocated_bytes(entry: Entry) -> int:
    """Return the bytes allocated to the entry on disk."""
    if entry.stat is None:
        return 0
    blocks = getattr(entry.stat, 'st_blocks', None)
    if blocks is None:
        # Platforms without st_blocks: fall back to the file size
        return entry.stat.st_size
    return blocks * STAT_BLOCK_BYTES


def block_units(entry: Entry, block_size: int) -> int:
    """Return the entry's allocated blocks in units of block_size bytes."""
    return -(-allocated_bytes(entry) // block_size)


class DisplayCollector:
    """Filter one sibling list and compute its display statistics.

    Errors found on entries are handed to the error policy; the entries
    themselves stay in the list and are masked out.
    """

    def __init__(self,
                 config: ListingConfig,
                 error_policy: ErrorPolicy,
                 lookup: Optional[NameLookup] = None):
        """Initialize the collector.

        Args:
            config: Listing configuration
            error_policy: Where entry errors are reported
            lookup: User and group name lookup, built from config if None
        """
        self.config = config
        self.error_policy = error_policy
        self.lookup = lookup or NameLookup(numeric_only=config.numeric_only)

    def collect(self, parent: Optional[Entry],
                siblings: Optional[Sequence[Entry]]) -> Optional[DisplayDescriptor]:
        """Select and measure the entries of one directory.

        Args:
            parent: Directory the siblings belong to, None for the roots
            siblings: Entries to consider, None or empty for no children

        Returns:
            DisplayDescriptor, or None if no entry is printed

        Raises:
            AllocationError: If a rendering annotation cannot be built
        """
        if not siblings:
            return None

        config = self.config
        entries = list(siblings)
        descriptor = DisplayDescriptor(
            entries=entries,
            visible=[False] * len(entries),
            parent=parent,
            needs_stats=config.needs_stats,
        )

        maxblock = maxinode = maxnlink = maxsize = 0
        total_bytes = 0

        try:
            for index, entry in enumerate(entries):
                if not self._select(parent, entry):
                    continue

                descriptor.visible[index] = True
                descriptor.count += 1
                descriptor.maxlen = max(descriptor.maxlen, len(entry.name))

                if not descriptor.needs_stats or entry.stat is None:
                    continue

                st = entry.stat
                blocks = block_units(entry, config.block_size)
                maxblock = max(maxblock, blocks)
                maxinode = max(maxinode, st.st_ino)
                maxnlink = max(maxnlink, st.st_nlink)
                maxsize = max(maxsize, st.st_size)
                total_bytes += allocated_bytes(entry)

                if config.long_format:
                    annotation = self._annotate(entry)
                    descriptor.annotations[index] = annotation
                    descriptor.s_user = max(descriptor.s_user, len(annotation.user))
                    descriptor.s_group = max(descriptor.s_group, len(annotation.group))
                    if annotation.flags is not None:
                        descriptor.s_flags = max(descriptor.s_flags, len(annotation.flags))
                    if stat.S_ISCHR(st.st_mode) or stat.S_ISBLK(st.st_mode):
                        descriptor.bcfile = True
        except MemoryError as error:
            descriptor.release()
            raise AllocationError(entry.name, "cannot allocate rendering annotation") from error

        if not descriptor.count:
            return None

        if descriptor.needs_stats:
            # Rounded once over the sum, not per entry
            descriptor.btotal = -(-total_bytes // config.block_size)
            descriptor.s_block = len(str(maxblock))
            descriptor.s_inode = len(str(maxinode))
            descriptor.s_nlink = len(str(maxnlink))
            descriptor.s_size = len(str(maxsize))

        return descriptor

    def _select(self, parent: Optional[Entry], entry: Entry) -> bool:
        """Decide whether an entry is printed, reporting error entries."""
        if entry.info in (EntryInfo.ERR, EntryInfo.NS):
            self.error_policy.handle(NodeError.from_errno(entry.name, entry.errno))
            return False

        if parent is None:
            # Directories named as roots are listed during their own visit
            if entry.info is EntryInfo.D and not self.config.list_directory:
                return False
        elif entry.is_hidden and not self.config.show_hidden:
            return False

        return True

    def _annotate(self, entry: Entry) -> EntryAnnotation:
        st = entry.stat
        return EntryAnnotation(
            user=self.lookup.user_name(st.st_uid),
            group=self.lookup.group_name(st.st_gid),
            flags=NO_FLAGS if self.config.show_flags else None,
        )
