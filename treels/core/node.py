"""Entry abstraction for treels.

An Entry is one filesystem node discovered by the walk. It is kept as a
plain data container: the walk primitive fills it in, the comparators and
the aggregation pass only read it.
"""

import os
from enum import Enum
from typing import Optional


# Level of entries named directly by the caller
ROOT_LEVEL = 0


class EntryInfo(Enum):
    """What a traversal event reports about its entry."""
    D = "directory"                     # Directory, pre-order
    DP = "directory_post"               # Directory, post-order
    F = "file"                          # Regular file
    SL = "symlink"                      # Symbolic link
    SLNONE = "symlink_none"             # Symbolic link without target
    DEFAULT = "default"                 # Any other kind of node
    DOT = "dot"                         # Synthesized "." or ".."
    DC = "cycle"                        # Directory that causes a cycle
    DNR = "unreadable"                  # Directory that cannot be read
    ERR = "error"                       # Generic error
    NS = "no_stat"                      # stat failed
    NSOK = "no_stat_ok"                 # stat not requested

    @property
    def is_error(self) -> bool:
        """Whether the entry carries an error instead of usable metadata."""
        return self in (EntryInfo.ERR, EntryInfo.NS, EntryInfo.DNR)


class Entry:
    """One node of the walk.

    Attributes:
        name: Basename for descendants, the argument text for roots
        path: Path of the entry as reached by the walk
        accpath: Path used to access the entry
        level: Depth, ROOT_LEVEL for root arguments
        info: EntryInfo describing the node or the event
        stat: stat result, None when unavailable or not requested
        errno: OS error number for error entries
        parent: Parent entry, None for roots
    """

    __slots__ = ('name', 'path', 'accpath', 'level', 'info', 'stat',
                 'errno', 'parent', 'd_type_dir', 'instruction')

    def __init__(self,
                 name: str,
                 path: str,
                 level: int = ROOT_LEVEL,
                 info: EntryInfo = EntryInfo.NSOK,
                 stat_result: Optional[os.stat_result] = None,
                 errno: int = 0,
                 parent: Optional['Entry'] = None,
                 accpath: Optional[str] = None):
        self.name = name
        self.path = path
        self.accpath = accpath if accpath is not None else path
        self.level = level
        self.info = info
        self.stat = stat_result
        self.errno = errno
        self.parent = parent
        # Directory hint from the directory entry, for entries without stat
        self.d_type_dir = False
        # Pending instruction set through the walk (e.g. skip)
        self.instruction = None

    @property
    def is_root(self) -> bool:
        return self.level == ROOT_LEVEL

    @property
    def is_hidden(self) -> bool:
        """Whether the name begins with the hidden-file marker."""
        return self.name.startswith('.')

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"Entry(path={self.path!r}, level={self.level}, info={self.info.name})"
