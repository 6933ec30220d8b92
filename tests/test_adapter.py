"""Tests for the tree walker adapter."""

import errno
import unittest
from unittest.mock import Mock

import pytest

from treels.adapters.filesystem import SKIP
from treels.config import WalkOptions
from treels.core.adapter import TreeWalkerAdapter
from treels.core.node import Entry, EntryInfo
from treels.errors import WalkOpenError, WalkReadError


class FakeWalk:
    """Walk primitive replaying a fixed list of entries."""

    def __init__(self, paths, options, compare):
        self.paths = paths
        self.options = options
        self.compare = compare
        self.entries = [Entry(p, p, info=EntryInfo.F) for p in paths]
        self.instructions = []
        self.closed = False
        self.names_only_calls = []

    def read(self):
        return self.entries.pop(0) if self.entries else None

    def children(self, names_only=False):
        self.names_only_calls.append(names_only)
        return []

    def set(self, entry, instruction):
        self.instructions.append((entry, instruction))

    def close(self):
        self.closed = True


class TestTreeWalkerAdapter(unittest.TestCase):
    """Test sequencing calls into the walk primitive."""

    def setUp(self):
        self.options = WalkOptions(nostat=True)
        self.comparator = Mock()
        self.adapter = TreeWalkerAdapter(self.options, self.comparator, FakeWalk)

    def test_open_passes_options_and_comparator(self):
        self.adapter.open(["a", "b"])
        walk = self.adapter._walk
        self.assertEqual(walk.paths, ["a", "b"])
        self.assertIs(walk.options, self.options)
        self.assertIs(walk.compare, self.comparator)
        self.assertTrue(self.adapter.is_open)

    def test_events_drain_the_walk(self):
        self.adapter.open(["a", "b"])
        self.assertEqual([e.name for e in self.adapter.events()], ["a", "b"])

    def test_skip_sets_instruction(self):
        self.adapter.open(["a"])
        entry = next(self.adapter.events())
        self.adapter.skip(entry)
        self.assertEqual(self.adapter._walk.instructions, [(entry, SKIP)])

    def test_get_children_forwards_names_only(self):
        self.adapter.open(["a"])
        walk = self.adapter._walk
        self.adapter.get_children(None)
        self.adapter.get_children(Entry("a", "a"), names_only=True)
        self.assertEqual(walk.names_only_calls, [False, True])

    def test_close_closes_walk(self):
        self.adapter.open(["a"])
        walk = self.adapter._walk
        self.adapter.close()
        self.assertTrue(walk.closed)
        self.assertFalse(self.adapter.is_open)

    def test_context_manager(self):
        with self.adapter as adapter:
            adapter.open(["a"])
            walk = adapter._walk
        self.assertTrue(walk.closed)

    def test_reopen_closes_previous_walk(self):
        self.adapter.open(["a"])
        first = self.adapter._walk
        self.adapter.open(["b"])
        self.assertTrue(first.closed)

    def test_calls_before_open(self):
        with self.assertRaises(WalkReadError):
            self.adapter.get_children()
        with self.assertRaises(WalkReadError):
            list(self.adapter.events())


def test_open_wraps_os_errors():
    def failing_factory(paths, options, compare):
        raise FileNotFoundError(errno.ENOENT, "No such file or directory")

    adapter = TreeWalkerAdapter(WalkOptions(), walk_factory=failing_factory)
    with pytest.raises(WalkOpenError) as info:
        adapter.open(["gone"])
    assert info.value.name == "gone"
    assert info.value.errno == errno.ENOENT
    assert not adapter.is_open


def test_open_passes_walk_open_errors_through():
    adapter = TreeWalkerAdapter(WalkOptions())
    with pytest.raises(WalkOpenError):
        adapter.open([])
