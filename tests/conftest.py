"""Shared fixtures for the treels test suite."""

import stat
from types import SimpleNamespace

import pytest

from treels.core.node import Entry, EntryInfo, ROOT_LEVEL


def _fake_stat(mode=stat.S_IFREG | 0o644, size=0, ino=1, dev=1, nlink=1,
               uid=1000, gid=1000, blocks=0, mtime=0, atime=0, ctime=0, rdev=0):
    """Build an object with the stat fields treels reads."""
    return SimpleNamespace(
        st_mode=mode,
        st_size=size,
        st_ino=ino,
        st_dev=dev,
        st_nlink=nlink,
        st_uid=uid,
        st_gid=gid,
        st_blocks=blocks,
        st_rdev=rdev,
        st_mtime=float(mtime),
        st_atime=float(atime),
        st_ctime=float(ctime),
        st_mtime_ns=int(mtime * 1e9),
        st_atime_ns=int(atime * 1e9),
        st_ctime_ns=int(ctime * 1e9),
    )


_INFO_MODES = {
    EntryInfo.D: stat.S_IFDIR | 0o755,
    EntryInfo.DP: stat.S_IFDIR | 0o755,
    EntryInfo.SL: stat.S_IFLNK | 0o777,
}


def _make_entry(name, info=EntryInfo.F, level=1, parent=None, errno=0, **stat_fields):
    """Build an Entry with a fake stat matching its info."""
    stat_result = None
    if info not in (EntryInfo.NS, EntryInfo.ERR, EntryInfo.NSOK):
        stat_fields.setdefault('mode', _INFO_MODES.get(info, stat.S_IFREG | 0o644))
        stat_result = _fake_stat(**stat_fields)
    path = name if level == ROOT_LEVEL or parent is None else f"{parent.path}/{name}"
    return Entry(name, path, level=level, info=info, stat_result=stat_result,
                 errno=errno, parent=parent)


@pytest.fixture
def fake_stat():
    """Factory for fake stat results."""
    return _fake_stat


@pytest.fixture
def make_entry():
    """Factory for entries with fake stat results."""
    return _make_entry


@pytest.fixture
def directory():
    """A root directory entry to use as parent of test siblings."""
    return _make_entry("dir", EntryInfo.D, level=ROOT_LEVEL)
