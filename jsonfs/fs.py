import errno
import logging
import os

from fuse import FUSE, FuseOSError, Operations

from .errors import MountError, RequestError
from .log import TRACE

log = logging.getLogger(__name__)

BLOCK_SIZE = 4096
NAME_MAX = 255


class JSONFS(Operations):
    """fusepy front end for a MountSession.

    fusepy hands us paths, so every request resolves its path to an inode
    first and then asks the session. Write operations are left to the
    Operations defaults, which answer EROFS.
    """

    def __init__(self, session):
        self.session = session

    def __call__(self, op, *args):
        log.log(TRACE, '-> %s %r', op, args)
        try:
            ret = super().__call__(op, *args)
        except FuseOSError as e:
            log.log(TRACE, '<- %s %s', op, errno.errorcode.get(e.errno, e.errno))
            raise
        except RequestError as e:
            log.debug('%s %r: %s', op, args[:1], e)
            raise FuseOSError(e.errno) from e
        except Exception:
            log.exception('Unexpected error in %s %r', op, args[:1])
            raise FuseOSError(errno.EIO) from None
        log.log(TRACE, '<- %s %r', op, ret)
        return ret

    def getattr(self, path, fh=None):
        ino = self.session.resolve(path)
        return self.session.getattr(ino).to_stat()

    def access(self, path, amode):
        self.session.resolve(path)
        if amode & os.W_OK:
            raise FuseOSError(errno.EROFS)
        return 0

    def opendir(self, path):
        return self.session.opendir(self.session.resolve(path))

    def readdir(self, path, fh):
        # a list, not a generator: errors must surface inside __call__
        entries = []
        for entry in self.session.readdir(self.session.resolve(path)):
            st = self.session.getattr(entry.inode)
            entries.append((entry.name, {'st_ino': st.inode, 'st_mode': st.mode}, 0))
        return entries

    def releasedir(self, path, fh):
        self.session.release(fh)
        return 0

    def open(self, path, flags):
        return self.session.open(self.session.resolve(path), flags)

    def read(self, path, size, offset, fh):
        ino = self.session.handles.get(fh)
        return self.session.read(ino, offset, size)

    def release(self, path, fh):
        self.session.release(fh)
        return 0

    def statfs(self, path):
        table = self.session.table
        return {
            'f_bsize': BLOCK_SIZE,
            'f_frsize': BLOCK_SIZE,
            'f_blocks': (table.total_size + BLOCK_SIZE - 1) // BLOCK_SIZE,
            'f_bfree': 0,
            'f_bavail': 0,
            'f_files': len(table),
            'f_ffree': 0,
            'f_favail': 0,
            'f_namemax': NAME_MAX,
        }

    def destroy(self, path):
        self.session.close()
        log.info('Unmounted %s', self.session.source or 'document')


def mount(session, mountpoint, foreground=True, allow_other=False):
    """Serve session at mountpoint; returns once the filesystem is unmounted."""
    if not os.path.isdir(mountpoint):
        raise MountError('mount point %s is not a directory' % mountpoint)
    if not os.access(mountpoint, os.R_OK | os.X_OK):
        raise MountError('mount point %s is not accessible' % mountpoint)

    options = {'ro': True, 'fsname': 'jsonfs', 'use_ino': True}
    if allow_other:
        options['allow_other'] = True

    log.info('Mounting %s at %s', session.source or 'document', mountpoint)
    try:
        FUSE(JSONFS(session), mountpoint, foreground=foreground, **options)
    except RuntimeError as e:
        raise MountError('failed to mount %s: %s' % (mountpoint, e)) from e
