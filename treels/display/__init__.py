"""Display dispatch and renderers for treels."""

from .renderers import (
    Renderer,
    SingleColumnRenderer,
    ColumnsRenderer,
    AcrossRenderer,
    StreamRenderer,
    LongRenderer,
    create_renderer,
    register_renderer,
)

__all__ = [
    'Renderer',
    'SingleColumnRenderer',
    'ColumnsRenderer',
    'AcrossRenderer',
    'StreamRenderer',
    'LongRenderer',
    'create_renderer',
    'register_renderer',
]
