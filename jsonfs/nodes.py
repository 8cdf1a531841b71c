"""Immutable node table built from a parsed JSON document.

Objects and arrays become directories, every other value becomes a file
whose content is rendered once, here, and never again.
"""
import enum
import logging
import math
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType

from .errors import IndexingError, NotADirectory, NotFound
from .inodes import ROOT_INODE, InodeAllocator, hash_path

log = logging.getLogger(__name__)

ROOT_NAME = '/'
_EMPTY = MappingProxyType({})


class NodeKind(enum.Enum):
    DIRECTORY = 'directory'
    FILE = 'file'


@dataclass(frozen=True)
class Node:
    inode: int
    kind: NodeKind
    name: str
    parent: int | None
    path: str
    children: MappingProxyType = field(default_factory=lambda: _EMPTY)
    content: bytes = b''

    @property
    def is_dir(self):
        return self.kind is NodeKind.DIRECTORY

    @property
    def size(self):
        return len(self.content)


def render_scalar(value):
    if value is None:
        return b'null'
    # bool before int: True is an int too
    if value is True:
        return b'true'
    if value is False:
        return b'false'
    if isinstance(value, int):
        return str(value).encode('ascii')
    if isinstance(value, float):
        if not math.isfinite(value):
            raise IndexingError('non-finite number %r has no JSON form' % value)
        return repr(value).encode('ascii')
    if isinstance(value, Decimal) and value.is_finite():
        return str(value).encode('ascii')
    if isinstance(value, str):
        return value.encode('utf-8', 'surrogatepass')
    raise IndexingError('unsupported value of type %s' % type(value).__name__)


def _check_name(name, parent_path):
    where = parent_path or ROOT_NAME
    if name in ('', '.', '..'):
        raise IndexingError('invalid key %r in %s' % (name, where), where)
    if '/' in name or '\0' in name:
        raise IndexingError('key %r in %s contains a path separator or NUL byte'
                            % (name, where), where)
    try:
        name.encode('utf-8')
    except UnicodeEncodeError:
        raise IndexingError('key %r in %s is not valid UTF-8' % (name, where), where) from None


def _entries(value):
    if isinstance(value, dict):
        return list(value.items())
    return [(str(i), v) for i, v in enumerate(value)]


def _is_container(value):
    return isinstance(value, (dict, list))


class NodeTable:
    """Arena of nodes keyed by inode.

    Only ever constructed complete by build_table(), and read-only from then
    on, so lookups need no locking.
    """

    def __init__(self, nodes, collisions=0):
        self._nodes = nodes
        self.collisions = collisions
        self.file_count = sum(1 for n in nodes.values() if not n.is_dir)
        self.dir_count = len(nodes) - self.file_count
        self.total_size = sum(n.size for n in nodes.values())

    def __len__(self):
        return len(self._nodes)

    def __iter__(self):
        return iter(self._nodes.values())

    def __contains__(self, inode):
        return inode in self._nodes

    @property
    def root(self):
        return self._nodes[ROOT_INODE]

    def get(self, inode):
        try:
            return self._nodes[inode]
        except KeyError:
            raise NotFound('no node with inode %s' % inode) from None

    def child(self, parent, name):
        node = self.get(parent)
        if not node.is_dir:
            raise NotADirectory('%s is not a directory' % (node.path or ROOT_NAME))
        try:
            return node.children[name]
        except KeyError:
            raise NotFound('%r not found in %s' % (name, node.path or ROOT_NAME)) from None

    def walk(self, path):
        """Return the node at an absolute slash-separated path."""
        inode = ROOT_INODE
        for part in path.split('/'):
            if part:
                inode = self.child(inode, part)
        return self._nodes[inode]


def build_table(document, hasher=hash_path):
    """Index a parsed document; the root must be an object or an array."""
    if not _is_container(document):
        raise IndexingError('document root must be an object or an array, not %s'
                            % type(document).__name__)

    allocator = InodeAllocator(hasher)
    # inode -> [name, parent, path, value, children]; frozen into Nodes at the end
    pending = {}
    stack = [(document, ROOT_NAME, None, '', ROOT_INODE)]
    while stack:
        value, name, parent, path, inode = stack.pop()
        if inode is None:
            inode = allocator.allocate(path)
            pending[parent][4][name] = inode
        children = {} if _is_container(value) else None
        pending[inode] = [name, parent, path, value, children]
        if children is None:
            continue
        entries = _entries(value)
        for child_name, _ in entries:
            _check_name(child_name, path)
        child_prefix = path + '/' if path else ''
        # reversed so siblings are popped, and numbered, in document order
        for child_name, child_value in reversed(entries):
            stack.append((child_value, child_name, inode, child_prefix + child_name, None))

    nodes = {}
    for inode, (name, parent, path, value, children) in pending.items():
        if children is None:
            nodes[inode] = Node(inode, NodeKind.FILE, name, parent, path,
                                content=render_scalar(value))
        else:
            nodes[inode] = Node(inode, NodeKind.DIRECTORY, name, parent, path,
                                children=MappingProxyType(children))

    table = NodeTable(nodes, allocator.collisions)
    log.debug('Indexed %d nodes (%d directories, %d files, %d inode collisions)',
              len(table), table.dir_count, table.file_count, table.collisions)
    return table
