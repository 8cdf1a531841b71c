__version__ = '0.1.0'

from .errors import (IndexingError, IsADirectory, JsonFSError, MountError,  # noqa: E402
                     NotADirectory, NotFound, ParseError, ReadOnlyViolation)
from .loader import load_document, parse_document  # noqa: E402
from .nodes import Node, NodeKind, NodeTable, build_table  # noqa: E402
from .session import MountSession  # noqa: E402

__all__ = [
    'IndexingError', 'IsADirectory', 'JsonFSError', 'MountError', 'NotADirectory',
    'NotFound', 'ParseError', 'ReadOnlyViolation', 'load_document', 'parse_document',
    'Node', 'NodeKind', 'NodeTable', 'build_table', 'MountSession',
]
