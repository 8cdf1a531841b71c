import heapq
import logging
import os
import threading

from .errors import NotFound, ReadOnlyViolation

log = logging.getLogger(__name__)

WRITE_FLAGS = os.O_WRONLY | os.O_RDWR | os.O_APPEND | os.O_TRUNC | os.O_CREAT


def is_write_intent(flags):
    return bool(flags & WRITE_FLAGS)


class HandleTable:
    """Open file handles, the only mutable state of a mount.

    The smallest free id is handed out first, so ids are reused after
    release.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._handles = {}
        self._free = []
        self._next = 1

    def __len__(self):
        with self._lock:
            return len(self._handles)

    def open(self, inode, flags=os.O_RDONLY):
        if is_write_intent(flags):
            raise ReadOnlyViolation('inode %d cannot be opened for writing' % inode)
        with self._lock:
            if self._free:
                fh = heapq.heappop(self._free)
            else:
                fh = self._next
                self._next += 1
            self._handles[fh] = inode
        return fh

    def get(self, fh):
        with self._lock:
            try:
                return self._handles[fh]
            except KeyError:
                raise NotFound('no open handle %s' % fh) from None

    def release(self, fh):
        with self._lock:
            try:
                del self._handles[fh]
            except KeyError:
                raise NotFound('no open handle %s' % fh) from None
            heapq.heappush(self._free, fh)

    def release_all(self):
        with self._lock:
            count = len(self._handles)
            self._handles.clear()
            self._free = []
            self._next = 1
        if count:
            log.info('Released %d open handles', count)
        return count
