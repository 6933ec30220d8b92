"""Command line interface for treels.

Flags are applied in the order they are given, so that later flags
overrule earlier ones the way shell aliases expect (``-l1`` lists one
name per line, ``-1l`` lists in long format).
"""

import argparse
import os
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .api import list_paths
from .config import DisplayMode, ListingConfig, SortKey, SymlinkMode, TimeField
from .errors import ConfigurationError
from .lookups import is_terminal, terminal_width

PROG = "treels"
USAGE = "%(prog)s [-1ACFLRSTWacdfgiklmnopqrstux] [file ...]"

# Sort selections that are resolved after all flags are seen
SORT_BY_SIZE = "size"
SORT_BY_TIME = "time"


def _display(mode: DisplayMode, **extra):
    def apply(settings: Dict[str, Any]) -> None:
        settings['display_mode'] = mode
        settings.update(extra)
    return apply


def _set(**values):
    def apply(settings: Dict[str, Any]) -> None:
        settings.update(values)
    return apply


def _sort(key: str):
    def apply(settings: Dict[str, Any]) -> None:
        settings['sort_by'] = key
    return apply


# Flag letter -> (change applied to the settings, help text)
FLAGS = {
    '1': (_display(DisplayMode.SINGLE_COLUMN), "one entry per line"),
    'C': (_display(DisplayMode.COLUMNS), "multi-column output, sorted down"),
    'l': (_display(DisplayMode.LONG, numeric_only=False), "long format"),
    'm': (_display(DisplayMode.STREAM), "comma separated stream"),
    'x': (_display(DisplayMode.ACROSS), "multi-column output, sorted across"),
    'n': (_display(DisplayMode.LONG, numeric_only=True), "long format, numeric ids"),
    'c': (_set(time_field=TimeField.STATUS), "use status change time"),
    'u': (_set(time_field=TimeField.ACCESS), "use access time"),
    'F': (_set(classify=True), "append a type indicator"),
    'L': (_set(symlink_mode=SymlinkMode.LOGICAL), "follow symbolic links"),
    'R': (_set(recursive=True), "list subdirectories recursively"),
    'a': (_set(see_dot=True, show_hidden=True), "include entries starting with ."),
    'A': (_set(show_hidden=True), "like -a, without . and .."),
    'd': (_set(list_directory=True, recursive=False), "list directories themselves"),
    'f': (_set(no_sort=True), "do not sort"),
    'g': (_set(compat_group=True), "ignored, for compatibility"),
    'i': (_set(show_inode=True), "print inode numbers"),
    'k': (_set(block_size=1024), "block sizes in kilobytes"),
    'o': (_set(show_flags=True), "print file flags"),
    'p': (_set(classify_dirs=True), "append / to directories"),
    'q': (_set(nonprint=True), "print non-printable characters as ?"),
    'r': (_set(reverse=True), "reverse the sort order"),
    'S': (_sort(SORT_BY_SIZE), "sort by size"),
    's': (_set(show_blocks=True), "print block counts"),
    'T': (_set(full_time=True), "print complete time information"),
    't': (_sort(SORT_BY_TIME), "sort by time"),
    'W': (_set(whiteout=True), "ignored, no whiteouts on this platform"),
}


class FlagAction(argparse.Action):
    """Apply one flag's change to the settings as it is parsed."""

    def __init__(self, option_strings, dest, apply=None, **kwargs):
        kwargs['nargs'] = 0
        super().__init__(option_strings, dest, **kwargs)
        self.apply = apply

    def __call__(self, parser, namespace, values, option_string=None):
        self.apply(namespace.settings)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one action per flag."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        usage=USAGE,
        description="List directory contents.",
        add_help=False,
    )
    for letter, (apply, help_text) in FLAGS.items():
        parser.add_argument(
            f"-{letter}", action=FlagAction, apply=apply,
            dest=argparse.SUPPRESS, help=help_text,
        )
    parser.add_argument("--help", action="help", help="show this help message and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("paths", nargs="*", metavar="file", help="files and directories to list")
    return parser


def initial_settings(stream=None, environ=None, uid: Optional[int] = None) -> Dict[str, Any]:
    """Settings in effect before any flag is applied.

    A terminal defaults to ``-Cq`` at the terminal width, anything else to
    ``-1``. The superuser sees hidden entries without asking.
    """
    stream = stream if stream is not None else sys.stdout
    settings: Dict[str, Any] = {'sort_by': None}
    if is_terminal(stream):
        settings.update(
            display_mode=DisplayMode.COLUMNS,
            nonprint=True,
            term_width=terminal_width(stream, environ),
        )
    else:
        settings['display_mode'] = DisplayMode.SINGLE_COLUMN

    if uid is None:
        uid = os.getuid()
    if uid == 0:
        settings['show_hidden'] = True
    return settings


def config_from_settings(settings: Dict[str, Any]) -> ListingConfig:
    """Resolve parsed settings into a ListingConfig.

    The time field picked by ``-c`` or ``-u`` decides which timestamp
    ``-t`` sorts by, whatever order the flags came in.
    """
    settings = dict(settings)
    sort_by = settings.pop('sort_by', None)
    if sort_by == SORT_BY_SIZE:
        settings['sort_key'] = SortKey.SIZE
    elif sort_by == SORT_BY_TIME:
        time_field = settings.get('time_field', TimeField.MODIFICATION)
        settings['sort_key'] = time_field.sort_key()
    return ListingConfig(**settings)


def parse_args(argv: Optional[List[str]] = None, stream=None, environ=None,
               uid: Optional[int] = None):
    """Parse arguments into a config and the list of paths.

    Returns:
        Tuple of (ListingConfig, paths)
    """
    parser = build_parser()
    namespace = argparse.Namespace(settings=initial_settings(stream, environ, uid))
    args = parser.parse_args(argv, namespace=namespace)
    return config_from_settings(args.settings), args.paths


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the treels command.

    Returns:
        Exit status, 0 on success and 1 if anything failed
    """
    config, paths = parse_args(argv)
    try:
        return list_paths(paths, config, stream=sys.stdout)
    except ConfigurationError as error:
        sys.stderr.write(f"{PROG}: {error}\n")
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == '__main__':
    sys.exit(main())
