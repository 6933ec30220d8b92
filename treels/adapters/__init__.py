"""Walk primitives for treels."""

from .filesystem import FileTreeWalk, SKIP

__all__ = [
    'FileTreeWalk',
    'SKIP',
]
