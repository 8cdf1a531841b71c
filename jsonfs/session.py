"""The mount session: one indexed document and the queries run against it.

Everything except the handle table is read-only after construction, so
lookup, getattr, readdir and read may run concurrently without locks.
"""
import logging
import os
import stat
import time
from collections import namedtuple

from .errors import IsADirectory, NotADirectory
from .handles import HandleTable
from .inodes import ROOT_INODE
from .loader import load_document
from .nodes import NodeKind, build_table

log = logging.getLogger(__name__)

DIR_MODE = stat.S_IFDIR | 0o555
FILE_MODE = stat.S_IFREG | 0o444

DirEntry = namedtuple('DirEntry', 'name inode kind offset')


class Attributes(namedtuple('Attributes',
                            'inode kind size mode nlink uid gid atime mtime ctime')):
    __slots__ = ()

    def to_stat(self):
        return {
            'st_ino': self.inode,
            'st_mode': self.mode,
            'st_nlink': self.nlink,
            'st_size': self.size,
            'st_blocks': (self.size + 511) // 512,
            'st_uid': self.uid,
            'st_gid': self.gid,
            'st_atime': self.atime,
            'st_mtime': self.mtime,
            'st_ctime': self.ctime,
        }


class MountSession:
    def __init__(self, table, source=None, mount_time=None, uid=None, gid=None):
        self.table = table
        self.source = source
        self.mount_time = time.time() if mount_time is None else mount_time
        self.uid = os.getuid() if uid is None else uid
        self.gid = os.getgid() if gid is None else gid
        self.handles = HandleTable()

    @classmethod
    def from_file(cls, path, **kwargs):
        table = build_table(load_document(path))
        log.info('Loaded %s: %d directories, %d files, %d bytes',
                 path, table.dir_count, table.file_count, table.total_size)
        return cls(table, source=path, **kwargs)

    # Path resolution

    def lookup(self, parent, name):
        return self.table.child(parent, name)

    def resolve(self, path):
        inode = ROOT_INODE
        for part in path.split('/'):
            if part:
                inode = self.lookup(inode, part)
        return inode

    # Attributes and content

    def getattr(self, inode):
        node = self.table.get(inode)
        if node.is_dir:
            mode, nlink = DIR_MODE, 2
        else:
            mode, nlink = FILE_MODE, 1
        t = self.mount_time
        return Attributes(inode, node.kind, node.size, mode, nlink,
                          self.uid, self.gid, t, t, t)

    def read(self, inode, offset, length):
        node = self.table.get(inode)
        if node.is_dir:
            raise IsADirectory('%s is a directory' % (node.path or node.name))
        offset = max(offset, 0)
        if length <= 0 or offset >= node.size:
            return b''
        return node.content[offset:offset + length]

    # Directory listing

    def readdir(self, inode, offset=0):
        node = self.table.get(inode)
        if not node.is_dir:
            raise NotADirectory('%s is not a directory' % node.path)
        parent = inode if node.parent is None else node.parent
        entries = [('.', inode, NodeKind.DIRECTORY), ('..', parent, NodeKind.DIRECTORY)]
        entries.extend((name, child, self.table.get(child).kind)
                       for name, child in node.children.items())
        offset = max(offset, 0)
        return [DirEntry(name, ino, kind, pos + 1)
                for pos, (name, ino, kind) in enumerate(entries) if pos >= offset]

    # Handles

    def open(self, inode, flags=os.O_RDONLY):
        node = self.table.get(inode)
        fh = self.handles.open(inode, flags)
        log.debug('Opened %s as handle %d', node.path or node.name, fh)
        return fh

    def opendir(self, inode):
        node = self.table.get(inode)
        if not node.is_dir:
            raise NotADirectory('%s is not a directory' % node.path)
        return self.handles.open(inode)

    def release(self, fh):
        self.handles.release(fh)

    def close(self):
        return self.handles.release_all()
