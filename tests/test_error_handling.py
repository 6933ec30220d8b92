"""
Tests for the error taxonomy and error policies.
"""

import errno
import io
import os
import unittest

import pytest

from treels.error_policies import (
    CollectErrorsPolicy,
    FailFastPolicy,
    ReportErrorsPolicy,
    create_policy,
)
from treels.errors import (
    AllocationError,
    CycleError,
    ListingError,
    NodeError,
    WalkOpenError,
    WalkReadError,
)


class TestErrors(unittest.TestCase):
    """Test error construction and formatting."""

    def test_line_format(self):
        error = NodeError("sub", "Permission denied", errno.EACCES)
        self.assertEqual(error.line(), "sub: Permission denied")
        self.assertEqual(str(error), "sub: Permission denied")

    def test_from_errno(self):
        error = NodeError.from_errno("gone", errno.ENOENT)
        self.assertIsInstance(error, NodeError)
        self.assertEqual(error.message, os.strerror(errno.ENOENT))
        self.assertEqual(error.errno, errno.ENOENT)

    def test_from_os_error(self):
        error = WalkOpenError.from_os_error("x", PermissionError(errno.EACCES, "denied"))
        self.assertEqual(error.errno, errno.EACCES)
        without_errno = WalkReadError.from_os_error("walk", OSError("broken"))
        self.assertEqual(without_errno.line(), "walk: broken")

    def test_cycle_message(self):
        self.assertEqual(CycleError("loop").line(), "loop: directory causes a cycle")

    def test_fatality(self):
        self.assertTrue(WalkOpenError.fatal)
        self.assertTrue(WalkReadError.fatal)
        self.assertFalse(NodeError.fatal)
        self.assertFalse(CycleError.fatal)
        self.assertFalse(AllocationError.fatal)
        self.assertTrue(issubclass(AllocationError, ListingError))


class TestErrorPolicies:
    """Test individual error policy behaviors."""

    def test_report_policy_writes_lines(self):
        stream = io.StringIO()
        policy = ReportErrorsPolicy(stream)
        policy.handle(NodeError("a", "bad"))
        policy.handle(CycleError("b"))

        assert stream.getvalue() == "a: bad\nb: directory causes a cycle\n"
        assert policy.failed

    def test_report_policy_prefix(self):
        stream = io.StringIO()
        ReportErrorsPolicy(stream, prefix="treels").handle(NodeError("a", "bad"))
        assert stream.getvalue() == "treels: a: bad\n"

    def test_report_policy_fatal(self):
        stream = io.StringIO()
        policy = ReportErrorsPolicy(stream)
        policy.report_fatal(WalkOpenError("''", "No such file or directory"))
        assert stream.getvalue() == "'': No such file or directory\n"
        assert policy.failed

    def test_collect_policy_is_silent(self, capsys):
        policy = CollectErrorsPolicy()
        assert not policy.failed
        policy.handle(NodeError("a", "bad"))
        policy.report_fatal(WalkReadError("walk", "broken"))

        assert policy.lines == ["a: bad", "walk: broken"]
        assert capsys.readouterr().err == ""

    def test_fail_fast_raises(self):
        policy = FailFastPolicy()
        with pytest.raises(NodeError):
            policy.handle(NodeError("a", "bad"))
        with pytest.raises(WalkOpenError):
            policy.report_fatal(WalkOpenError("walk", "bad"))
        assert len(policy.errors) == 2

    def test_statistics(self):
        policy = CollectErrorsPolicy()
        policy.handle(NodeError("a", "bad"))
        policy.handle(NodeError("b", "bad"))
        policy.handle(CycleError("c"))

        stats = policy.get_statistics()
        assert stats["total_errors"] == 3
        assert stats["by_type"] == {"NodeError": 2, "CycleError": 1}
        assert stats["errors"][2] == "c: directory causes a cycle"

    def test_create_policy(self):
        assert isinstance(create_policy(), ReportErrorsPolicy)
        assert isinstance(create_policy(strict=True), FailFastPolicy)
