"""Ordering policy for treels.

The field comparators compare two entries by name, size or one of the
three timestamps. The MasterComparator wraps the selected field comparator
and layers the rules that do not depend on the sort key on top of it:
error entries are never moved, entries that could not be stat-ed go last,
and root arguments are grouped directories first.
"""

from functools import cmp_to_key
from typing import Callable, Iterable, List, Optional

from .node import Entry, EntryInfo
from ..config import ListingConfig, SortKey

Comparator = Callable[[Entry, Entry], int]


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _size(entry: Entry) -> int:
    return entry.stat.st_size if entry.stat is not None else 0


def _time(entry: Entry, field: str) -> float:
    if entry.stat is None:
        return 0
    # Nanosecond fields keep sub-second ordering
    ns = getattr(entry.stat, f'{field}_ns', None)
    if ns is not None:
        return ns
    return getattr(entry.stat, field)


def namecmp(a: Entry, b: Entry) -> int:
    """Order by name."""
    return _cmp(a.name, b.name)


def revnamecmp(a: Entry, b: Entry) -> int:
    return namecmp(b, a)


def sizecmp(a: Entry, b: Entry) -> int:
    """Order by size, smallest first; equal sizes by name."""
    return _cmp(_size(a), _size(b)) or namecmp(a, b)


def revsizecmp(a: Entry, b: Entry) -> int:
    return sizecmp(b, a)


def modcmp(a: Entry, b: Entry) -> int:
    """Order by modification time, newest first; equal times by name."""
    return _cmp(_time(b, 'st_mtime'), _time(a, 'st_mtime')) or namecmp(a, b)


def revmodcmp(a: Entry, b: Entry) -> int:
    return modcmp(b, a)


def acccmp(a: Entry, b: Entry) -> int:
    """Order by access time, newest first; equal times by name."""
    return _cmp(_time(b, 'st_atime'), _time(a, 'st_atime')) or namecmp(a, b)


def revacccmp(a: Entry, b: Entry) -> int:
    return acccmp(b, a)


def statcmp(a: Entry, b: Entry) -> int:
    """Order by status change time, newest first; equal times by name."""
    return _cmp(_time(b, 'st_ctime'), _time(a, 'st_ctime')) or namecmp(a, b)


def revstatcmp(a: Entry, b: Entry) -> int:
    return statcmp(b, a)


_COMPARATORS = {
    (SortKey.NAME, False): namecmp,
    (SortKey.NAME, True): revnamecmp,
    (SortKey.SIZE, False): sizecmp,
    (SortKey.SIZE, True): revsizecmp,
    (SortKey.MTIME, False): modcmp,
    (SortKey.MTIME, True): revmodcmp,
    (SortKey.ATIME, False): acccmp,
    (SortKey.ATIME, True): revacccmp,
    (SortKey.CTIME, False): statcmp,
    (SortKey.CTIME, True): revstatcmp,
}


def select_comparator(sort_key: SortKey, reverse: bool = False) -> Comparator:
    """Return the field comparator for a sort key and direction.

    Args:
        sort_key: Field to order by
        reverse: Whether to use the mirrored variant

    Returns:
        Field comparator function

    Raises:
        ValueError: If the sort key is not recognized
    """
    try:
        return _COMPARATORS[(sort_key, bool(reverse))]
    except KeyError:
        raise ValueError(f"Unknown sort key: {sort_key!r}") from None


class MasterComparator:
    """Top-level ordering function used as the walk's sort callback.

    The field comparator only decides among entries the special cases
    leave alone, so reversing the sort key never changes where error
    entries, unstat-able entries or root-level directories end up.
    """

    def __init__(self, field_comparator: Comparator, list_directory: bool = False):
        """Initialize with the active field comparator.

        Args:
            field_comparator: One of the Comparator Set functions
            list_directory: True when directories are listed as entries
                themselves, which disables root-level grouping
        """
        self.field_comparator = field_comparator
        self.list_directory = list_directory

    @classmethod
    def from_config(cls, config: ListingConfig) -> 'MasterComparator':
        """Create the comparator a configuration selects."""
        return cls(
            select_comparator(config.sort_key, config.reverse),
            list_directory=config.list_directory,
        )

    def __call__(self, a: Entry, b: Entry) -> int:
        a_info = a.info
        b_info = b.info

        # Error entries stay where the walk put them
        if a_info is EntryInfo.ERR or b_info is EntryInfo.ERR:
            return 0

        if a_info is EntryInfo.NS or b_info is EntryInfo.NS:
            if b_info is not EntryInfo.NS:
                return 1
            if a_info is not EntryInfo.NS:
                return -1
            return namecmp(a, b)

        # Root arguments: directories ahead of everything else
        if (a_info is not b_info and a.is_root and b.is_root
                and not self.list_directory):
            if a_info is EntryInfo.D:
                return -1
            if b_info is EntryInfo.D:
                return 1

        return self.field_comparator(a, b)

    def sort(self, entries: Iterable[Entry]) -> List[Entry]:
        """Return entries in policy order (stable)."""
        return sorted(entries, key=cmp_to_key(self))

    def __repr__(self) -> str:
        return (f"MasterComparator({self.field_comparator.__name__}, "
                f"list_directory={self.list_directory})")


def sort_entries(entries: Iterable[Entry],
                 comparator: Optional[Callable[[Entry, Entry], int]]) -> List[Entry]:
    """Sort entries with comparator, or keep their order when it is None."""
    if comparator is None:
        return list(entries)
    return sorted(entries, key=cmp_to_key(comparator))
