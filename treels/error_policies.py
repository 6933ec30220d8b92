"""
Error handling policies for treels.

Non-fatal errors found while listing (unreadable directories, entries
that cannot be stat-ed, directory cycles) are handed to an ErrorPolicy,
which decides how they are reported. Every handled error marks the run as
failed, so the exit status reflects it even when the listing continues.
"""

import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, TextIO

from .errors import ListingError


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    Subclasses implement different strategies for errors that occur
    while walking and aggregating entries.
    """

    def __init__(self):
        self.errors: List[ListingError] = []

    @abstractmethod
    def handle(self, error: ListingError) -> None:
        """
        Handle an error that occurred during the listing.

        Args:
            error: The error, created but not raised by the caller

        Raises:
            ListingError: If the policy decides to stop the listing
        """
        pass

    def report_fatal(self, error: ListingError) -> None:
        """
        Report an error that ended the listing.

        Fatal errors have already unwound the traversal; policies only
        decide how they show up. The default records them.
        """
        self.record(error)

    def record(self, error: ListingError) -> None:
        """Remember an error so the run is reported as failed."""
        self.errors.append(error)

    @property
    def failed(self) -> bool:
        """True once any error has been handled."""
        return bool(self.errors)

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        counts: Dict[str, int] = {}
        for error in self.errors:
            kind = type(error).__name__
            counts[kind] = counts.get(kind, 0) + 1
        return {
            'total_errors': len(self.errors),
            'by_type': counts,
            'errors': [error.line() for error in self.errors],
        }


class ReportErrorsPolicy(ErrorPolicy):
    """
    Policy that writes each error to the error stream and continues.

    This is the default: one ``name: message`` line per error, the way
    the command line tool reports problems.
    """

    def __init__(self, stream: Optional[TextIO] = None, prefix: Optional[str] = None):
        """
        Initialize the policy.

        Args:
            stream: Error stream, sys.stderr when None
            prefix: Optional program name written before each line
        """
        super().__init__()
        self.stream = stream
        self.prefix = prefix

    def handle(self, error: ListingError) -> None:
        """Record the error and write it to the error stream."""
        self.record(error)
        stream = self.stream if self.stream is not None else sys.stderr
        line = error.line()
        if self.prefix:
            line = f"{self.prefix}: {line}"
        stream.write(line + "\n")
        stream.flush()

    def report_fatal(self, error: ListingError) -> None:
        """Fatal errors are written like any other."""
        self.handle(error)


class CollectErrorsPolicy(ErrorPolicy):
    """
    Policy that collects all errors without writing them.

    Useful when embedding the listing and presenting errors at the end.
    """

    def handle(self, error: ListingError) -> None:
        """Silently collect the error."""
        self.record(error)

    @property
    def lines(self) -> List[str]:
        return [error.line() for error in self.errors]


class FailFastPolicy(ErrorPolicy):
    """
    Policy that raises the first error, stopping the listing.

    Useful when a partial listing is not acceptable.
    """

    def handle(self, error: ListingError) -> None:
        """Record and raise the error."""
        self.record(error)
        raise error

    def report_fatal(self, error: ListingError) -> None:
        """Record and raise the fatal error."""
        self.record(error)
        raise error


def create_policy(strict: bool = False, stream: Optional[TextIO] = None) -> ErrorPolicy:
    """
    Convenience function to create an error policy.

    Args:
        strict: If True, use FailFastPolicy; otherwise ReportErrorsPolicy
        stream: Error stream for ReportErrorsPolicy

    Returns:
        An ErrorPolicy configured appropriately
    """
    if strict:
        return FailFastPolicy()
    return ReportErrorsPolicy(stream)
