"""Field formatting shared by the renderers."""

import os
import stat
import time
from typing import Optional

from ..config import ListingConfig, TimeField
from ..core.node import Entry

# Entries older than this (or in the future) show the year instead of the time
SIX_MONTHS = (365 // 2) * 86400

_FILE_TYPES = {
    stat.S_IFDIR: 'd',
    stat.S_IFCHR: 'c',
    stat.S_IFBLK: 'b',
    stat.S_IFREG: '-',
    stat.S_IFLNK: 'l',
    stat.S_IFSOCK: 's',
    stat.S_IFIFO: 'p',
}


def mode_string(mode: int) -> str:
    """Format a mode as ``drwxr-xr-x``, including setuid/setgid/sticky bits."""
    chars = [_FILE_TYPES.get(stat.S_IFMT(mode), '?')]

    for read, write, execute, special, on, off in (
        (stat.S_IRUSR, stat.S_IWUSR, stat.S_IXUSR, stat.S_ISUID, 's', 'S'),
        (stat.S_IRGRP, stat.S_IWGRP, stat.S_IXGRP, stat.S_ISGID, 's', 'S'),
        (stat.S_IROTH, stat.S_IWOTH, stat.S_IXOTH, stat.S_ISVTX, 't', 'T'),
    ):
        chars.append('r' if mode & read else '-')
        chars.append('w' if mode & write else '-')
        if mode & special:
            chars.append(on if mode & execute else off)
        else:
            chars.append('x' if mode & execute else '-')

    return ''.join(chars)


def entry_time(entry: Entry, field: TimeField) -> float:
    """Return the timestamp shown for an entry."""
    return getattr(entry.stat, f'st_{field.value}')


def format_time(timestamp: float, full: bool = False, now: Optional[float] = None) -> str:
    """Format a timestamp the way the long format prints it.

    Recent times show hours and minutes; times more than six months in the
    past or in the future show the year. ``full`` prints seconds and year.
    """
    now = time.time() if now is None else now
    local = time.localtime(timestamp)
    day = f"{local.tm_mday:2d}"
    if full:
        return time.strftime(f"%b {day} %H:%M:%S %Y", local)
    if now - SIX_MONTHS < timestamp < now + SIX_MONTHS:
        return time.strftime(f"%b {day} %H:%M", local)
    return time.strftime(f"%b {day}  %Y", local)


def printable(name: str, replace_nonprint: bool) -> str:
    """Return name with non-printable characters shown as "?"."""
    if not replace_nonprint:
        return name
    return ''.join(ch if ch.isprintable() else '?' for ch in name)


def type_suffix(entry: Entry, config: ListingConfig) -> str:
    """Return the type indicator printed after a name (-F, -p)."""
    if not (config.classify or config.classify_dirs) or entry.stat is None:
        return ''

    mode = entry.stat.st_mode
    if stat.S_ISDIR(mode):
        return '/'
    if config.classify_dirs and not config.classify:
        return ''
    if stat.S_ISLNK(mode):
        return '@'
    if stat.S_ISFIFO(mode):
        return '|'
    if stat.S_ISSOCK(mode):
        return '='
    if stat.S_ISREG(mode) and mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH):
        return '*'
    return ''


def link_target(entry: Entry) -> Optional[str]:
    """Return the target of a symbolic link entry, None if unreadable."""
    try:
        return os.readlink(entry.accpath)
    except OSError:
        return None


def device_numbers(entry: Entry) -> str:
    """Format major and minor device numbers of a device entry."""
    rdev = entry.stat.st_rdev
    return f"{os.major(rdev):3d}, {os.minor(rdev):3d}"
