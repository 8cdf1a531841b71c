import errno


class JsonFSError(Exception):
    pass


# Fatal: raised before any request is served.

class MountError(JsonFSError):
    pass


class ParseError(JsonFSError):
    def __init__(self, message, lineno=None, colno=None):
        super().__init__(message)
        self.lineno = lineno
        self.colno = colno

    def __str__(self):
        msg = super().__str__()
        if self.lineno is not None:
            return '%s (line %d, column %d)' % (msg, self.lineno, self.colno)
        return msg


class IndexingError(JsonFSError):
    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


# Per-request: mapped to a reply errno, never fatal.

class RequestError(JsonFSError):
    errno = errno.EIO


class NotFound(RequestError):
    errno = errno.ENOENT


class NotADirectory(RequestError):
    errno = errno.ENOTDIR


class IsADirectory(RequestError):
    errno = errno.EISDIR


class ReadOnlyViolation(RequestError):
    errno = errno.EROFS
