import hashlib

ROOT_INODE = 1
INODE_BITS = 63

# 0 is never a valid inode; 1 belongs to the root.
RESERVED_INODES = frozenset((0, ROOT_INODE))


def hash_path(path, salt=0):
    """Map a root-relative path to an inode number.

    The digest is truncated to INODE_BITS so it fits a signed 64-bit ino_t.
    A non-zero salt is appended after a NUL byte, which cannot occur in a
    node name, so salted and unsalted inputs never coincide.
    """
    data = path.encode('utf-8')
    if salt:
        data += b'\0' + str(salt).encode('ascii')
    digest = hashlib.blake2b(data, digest_size=8).digest()
    return int.from_bytes(digest, 'big') & ((1 << INODE_BITS) - 1)


class InodeAllocator:
    """Assigns collision-free inodes to paths in the order they are offered."""

    def __init__(self, hasher=hash_path):
        self.hasher = hasher
        self.assigned = {}
        self.collisions = 0

    def allocate(self, path):
        salt = 0
        while True:
            ino = self.hasher(path, salt)
            if ino not in RESERVED_INODES and ino not in self.assigned:
                self.assigned[ino] = path
                return ino
            self.collisions += 1
            salt += 1
