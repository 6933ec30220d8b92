"""Renderers for treels.

A renderer turns a DisplayDescriptor into output lines. The core only
relies on the Renderer interface; create_renderer picks the concrete
layout for a configuration, and register_renderer lets callers add their
own layouts.
"""

import stat
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, TextIO, Type

from ..config import DisplayMode, ListingConfig
from ..core.collector import DisplayDescriptor, EntryAnnotation, block_units
from ..core.node import Entry
from .formatting import (
    device_numbers,
    entry_time,
    format_time,
    link_target,
    mode_string,
    printable,
    type_suffix,
)

TAB_WIDTH = 8


class Renderer(ABC):
    """Abstract base class for output layouts.

    Renderers are pure consumers of the descriptor: they read the visible
    entries and the measured widths and never change them.
    """

    def __init__(self, config: ListingConfig):
        """Initialize renderer with the listing configuration.

        Args:
            config: Listing configuration
        """
        self.config = config

    @abstractmethod
    def render(self, descriptor: DisplayDescriptor, stream: TextIO) -> None:
        """Write the visible entries of descriptor to stream.

        Args:
            descriptor: Aggregated entries of one directory
            stream: Output stream
        """
        pass

    # Helpers shared by the layouts

    def format_name(self, entry: Entry, descriptor: DisplayDescriptor) -> str:
        """Format one entry the way the short layouts print it.

        The name is preceded by the inode and block count when requested
        and followed by the type indicator.
        """
        config = self.config
        parts = []
        if config.show_inode:
            inode = entry.stat.st_ino if entry.stat is not None else 0
            parts.append(f"{inode:>{descriptor.s_inode}} ")
        if config.show_blocks:
            blocks = block_units(entry, config.block_size)
            parts.append(f"{blocks:>{descriptor.s_block}} ")
        parts.append(printable(entry.name, config.nonprint))
        parts.append(type_suffix(entry, config))
        return ''.join(parts)

    def column_width(self, descriptor: DisplayDescriptor) -> int:
        """Width of one column, rounded up to the next tab stop."""
        width = descriptor.maxlen
        if self.config.show_inode:
            width += descriptor.s_inode + 1
        if self.config.show_blocks:
            width += descriptor.s_block + 1
        if self.config.classify or self.config.classify_dirs:
            width += 1
        return (width + TAB_WIDTH) & ~(TAB_WIDTH - 1)

    def write_total(self, descriptor: DisplayDescriptor, stream: TextIO) -> None:
        """Write the "total" line for directory contents."""
        if descriptor.is_root_list:
            return
        if self.config.long_format or self.config.show_blocks:
            stream.write(f"total {descriptor.btotal}\n")


class SingleColumnRenderer(Renderer):
    """One entry per line (-1)."""

    def render(self, descriptor: DisplayDescriptor, stream: TextIO) -> None:
        for entry in descriptor.visible_entries():
            stream.write(self.format_name(entry, descriptor) + "\n")


class _ColumnRenderer(Renderer):
    """Common code for the multi-column layouts."""

    def render(self, descriptor: DisplayDescriptor, stream: TextIO) -> None:
        entries = descriptor.visible_entries()
        colwidth = self.column_width(descriptor)

        if self.config.term_width < 2 * colwidth:
            SingleColumnRenderer(self.config).render(descriptor, stream)
            return

        numcols = self.config.term_width // colwidth
        self.write_total(descriptor, stream)

        cells = [self.format_name(entry, descriptor) for entry in entries]
        for row in self.arrange(cells, numcols):
            stream.write(self._join_row(row, colwidth) + "\n")

    @abstractmethod
    def arrange(self, cells: List[str], numcols: int) -> List[List[str]]:
        """Split cells into rows of at most numcols cells."""
        pass

    @staticmethod
    def _join_row(row: List[str], colwidth: int) -> str:
        """Pad every cell but the last with tabs up to its column end."""
        line = ''
        chcnt = 0
        endcol = colwidth
        for index, cell in enumerate(row):
            line += cell
            chcnt += len(cell)
            if index == len(row) - 1:
                break
            while True:
                stop = (chcnt + TAB_WIDTH) & ~(TAB_WIDTH - 1)
                if stop > endcol:
                    break
                line += '\t'
                chcnt = stop
            endcol += colwidth
        return line


class ColumnsRenderer(_ColumnRenderer):
    """Multi-column output sorted down the columns (-C)."""

    def arrange(self, cells: List[str], numcols: int) -> List[List[str]]:
        numrows = -(-len(cells) // numcols)
        return [cells[row::numrows] for row in range(numrows)]


class AcrossRenderer(_ColumnRenderer):
    """Multi-column output sorted across the rows (-x)."""

    def arrange(self, cells: List[str], numcols: int) -> List[List[str]]:
        return [cells[start:start + numcols] for start in range(0, len(cells), numcols)]


class StreamRenderer(Renderer):
    """Comma separated names, wrapped at the terminal width (-m)."""

    def render(self, descriptor: DisplayDescriptor, stream: TextIO) -> None:
        entries = descriptor.visible_entries()
        width = self.config.term_width
        chcnt = 0
        for index, entry in enumerate(entries):
            cell = self.format_name(entry, descriptor)
            last = index == len(entries) - 1
            if chcnt and chcnt + len(cell) + (0 if last else 2) >= width:
                stream.write("\n")
                chcnt = 0
            stream.write(cell)
            chcnt += len(cell)
            if not last:
                stream.write(", ")
                chcnt += 2
        if chcnt:
            stream.write("\n")


class LongRenderer(Renderer):
    """Long format (-l, -n)."""

    def render(self, descriptor: DisplayDescriptor, stream: TextIO) -> None:
        self.write_total(descriptor, stream)
        for entry, annotation in descriptor.iter_visible():
            stream.write(self.format_line(entry, annotation, descriptor) + "\n")

    def format_line(self, entry: Entry,
                    annotation: Optional[EntryAnnotation],
                    descriptor: DisplayDescriptor) -> str:
        """Format the long-format line for one entry."""
        config = self.config
        st = entry.stat
        if annotation is None:
            annotation = EntryAnnotation(user=str(st.st_uid), group=str(st.st_gid))

        parts = []
        if config.show_inode:
            parts.append(f"{st.st_ino:>{descriptor.s_inode}} ")
        if config.show_blocks:
            parts.append(f"{block_units(entry, config.block_size):>{descriptor.s_block}} ")

        parts.append(
            f"{mode_string(st.st_mode)}  {st.st_nlink:>{descriptor.s_nlink}} "
            f"{annotation.user:<{descriptor.s_user}}  "
            f"{annotation.group:<{descriptor.s_group}}  "
        )
        if config.show_flags:
            parts.append(f"{annotation.flags or '':<{descriptor.s_flags}} ")

        if stat.S_ISCHR(st.st_mode) or stat.S_ISBLK(st.st_mode):
            parts.append(device_numbers(entry) + " ")
        elif descriptor.bcfile:
            # Right-align sizes with the "major, minor" column
            parts.append(f"{st.st_size:>{max(8, descriptor.s_size)}} ")
        else:
            parts.append(f"{st.st_size:>{descriptor.s_size}} ")

        parts.append(format_time(entry_time(entry, config.time_field), config.full_time) + " ")
        parts.append(printable(entry.name, config.nonprint))
        parts.append(type_suffix(entry, config))

        if stat.S_ISLNK(st.st_mode):
            target = link_target(entry)
            if target is not None:
                parts.append(" -> " + printable(target, config.nonprint))

        return ''.join(parts)


_RENDERERS: Dict[DisplayMode, Type[Renderer]] = {
    DisplayMode.SINGLE_COLUMN: SingleColumnRenderer,
    DisplayMode.COLUMNS: ColumnsRenderer,
    DisplayMode.ACROSS: AcrossRenderer,
    DisplayMode.STREAM: StreamRenderer,
    DisplayMode.LONG: LongRenderer,
}


def register_renderer(mode: DisplayMode, renderer_class: Type[Renderer]) -> None:
    """Register the renderer class used for a display mode.

    Args:
        mode: Display mode to bind
        renderer_class: Renderer subclass instantiated with the config
    """
    if not (isinstance(renderer_class, type) and issubclass(renderer_class, Renderer)):
        raise TypeError(f"{renderer_class!r} is not a Renderer subclass")
    _RENDERERS[mode] = renderer_class


def create_renderer(config: ListingConfig) -> Renderer:
    """Create the renderer a configuration selects.

    Args:
        config: Listing configuration

    Returns:
        Renderer instance

    Raises:
        ValueError: If no renderer is registered for the display mode
    """
    try:
        renderer_class = _RENDERERS[config.display_mode]
    except KeyError:
        raise ValueError(
            f"Unknown display mode: {config.display_mode}. "
            f"Choose from: {', '.join(mode.value for mode in _RENDERERS)}"
        ) from None
    return renderer_class(config)
