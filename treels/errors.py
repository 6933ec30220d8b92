"""Error taxonomy for treels.

Every failure the listing can run into is a ListingError. Non-fatal
errors are created and handed to the active ErrorPolicy without being
raised; fatal ones are raised and unwind to the high-level API.
"""

import os
from typing import Optional


class ListingError(Exception):
    """Base class for all listing errors.

    Errors render as ``name: message``, which is the line written to the
    error channel.
    """

    fatal = False

    def __init__(self, name: str, message: str, errno: Optional[int] = None):
        """Initialize the error.

        Args:
            name: Entry name or operation the error is about
            message: Human readable description
            errno: OS error number, if the error came from a system call
        """
        super().__init__(f"{name}: {message}")
        self.name = name
        self.message = message
        self.errno = errno

    @classmethod
    def from_errno(cls, name: str, errno: int) -> 'ListingError':
        """Build an error whose message is the OS description of errno."""
        return cls(name, os.strerror(errno), errno)

    @classmethod
    def from_os_error(cls, name: str, error: OSError) -> 'ListingError':
        """Build an error from a caught OSError."""
        if error.errno is not None:
            return cls.from_errno(name, error.errno)
        return cls(name, str(error))

    def line(self) -> str:
        """Return the error-channel line for this error."""
        return f"{self.name}: {self.message}"


class NodeError(ListingError):
    """A single node could not be stat-ed, read or listed."""


class CycleError(ListingError):
    """A directory cycle was detected during physical traversal."""

    def __init__(self, name: str):
        super().__init__(name, "directory causes a cycle")


class WalkOpenError(ListingError):
    """The file-tree walk could not be initialized for the given roots."""

    fatal = True


class WalkReadError(ListingError):
    """The walk failed while advancing, independently of any node."""

    fatal = True


class AllocationError(ListingError):
    """A rendering annotation could not be built.

    Aborts the render of the current directory only.
    """


class ConfigurationError(Exception):
    """Raised when a ListingConfig is inconsistent."""
    pass
