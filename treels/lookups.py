"""Lookup services used while listing.

User and group names are resolved through the password and group
databases, falling back to the numeric id. The terminal width comes from
the environment or the terminal device.
"""

import grp
import os
import pwd
from typing import Dict, Mapping, Optional, TextIO

from .config import DEFAULT_TERM_WIDTH


class NameLookup:
    """Resolve user and group ids to names, with numeric fallback.

    Results are cached per instance since a listing asks for the same
    few ids over and over.
    """

    def __init__(self, numeric_only: bool = False):
        """Initialize the lookup.

        Args:
            numeric_only: Never consult the databases
        """
        self.numeric_only = numeric_only
        self._users: Dict[int, str] = {}
        self._groups: Dict[int, str] = {}

    def user_name(self, uid: int) -> str:
        """Return the login name for uid, or uid as a string."""
        if self.numeric_only:
            return str(uid)
        if uid not in self._users:
            self._users[uid] = self._lookup_user(uid) or str(uid)
        return self._users[uid]

    def group_name(self, gid: int) -> str:
        """Return the group name for gid, or gid as a string."""
        if self.numeric_only:
            return str(gid)
        if gid not in self._groups:
            self._groups[gid] = self._lookup_group(gid) or str(gid)
        return self._groups[gid]

    @staticmethod
    def _lookup_user(uid: int) -> Optional[str]:
        try:
            return pwd.getpwuid(uid).pw_name
        except KeyError:
            return None

    @staticmethod
    def _lookup_group(gid: int) -> Optional[str]:
        try:
            return grp.getgrgid(gid).gr_name
        except KeyError:
            return None


def terminal_width(stream: TextIO,
                   environ: Optional[Mapping[str, str]] = None,
                   default: int = DEFAULT_TERM_WIDTH) -> int:
    """Determine the output width in columns.

    For a terminal, COLUMNS wins, then the terminal device itself. Anything
    else gets the default.

    Args:
        stream: Output stream
        environ: Environment mapping, defaults to os.environ
        default: Width when nothing better is known

    Returns:
        Width in columns
    """
    if not is_terminal(stream):
        return default

    environ = os.environ if environ is None else environ
    columns = environ.get('COLUMNS')
    if columns:
        try:
            width = int(columns)
        except ValueError:
            width = 0
        if width > 0:
            return width

    try:
        size = os.get_terminal_size(stream.fileno())
    except (OSError, ValueError, AttributeError):
        return default
    return size.columns if size.columns > 0 else default


def is_terminal(stream: TextIO) -> bool:
    """Check whether a stream is attached to a terminal."""
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False
