import os
import threading

import pytest

from jsonfs.errors import NotFound, ReadOnlyViolation
from jsonfs.handles import HandleTable, is_write_intent


class TestWriteIntent:
    def test_read_only(self):
        assert not is_write_intent(os.O_RDONLY)
        assert not is_write_intent(os.O_RDONLY | os.O_NONBLOCK)

    @pytest.mark.parametrize('flag', [os.O_WRONLY, os.O_RDWR, os.O_APPEND, os.O_TRUNC, os.O_CREAT])
    def test_write_flags(self, flag):
        assert is_write_intent(flag)


class TestHandleTable:
    def test_ids_start_at_one(self):
        table = HandleTable()
        assert table.open(10) == 1
        assert table.open(10) == 2

    def test_same_inode_many_handles(self):
        table = HandleTable()
        a, b = table.open(7), table.open(7)
        assert a != b
        assert table.get(a) == table.get(b) == 7

    def test_smallest_free_id_reused(self):
        table = HandleTable()
        ids = [table.open(i) for i in range(5)]
        table.release(ids[3])
        table.release(ids[1])
        assert table.open(99) == ids[1]
        assert table.open(99) == ids[3]
        assert table.open(99) == 6

    def test_rejected_open_creates_nothing(self):
        table = HandleTable()
        with pytest.raises(ReadOnlyViolation):
            table.open(1, os.O_WRONLY)
        assert len(table) == 0
        assert table.open(1) == 1

    def test_release_unknown(self):
        table = HandleTable()
        with pytest.raises(NotFound):
            table.release(3)

    def test_double_release(self):
        table = HandleTable()
        fh = table.open(1)
        table.release(fh)
        with pytest.raises(NotFound):
            table.release(fh)

    def test_release_all(self):
        table = HandleTable()
        for i in range(4):
            table.open(i)
        assert table.release_all() == 4
        assert len(table) == 0
        assert table.open(1) == 1

    def test_concurrent_open_release(self):
        table = HandleTable()
        held = []
        errors = []

        def worker():
            try:
                for _ in range(200):
                    table.release(table.open(1))
                    held.append(table.open(2))
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert len(table) == len(held) == 8 * 200
        assert len(set(held)) == len(held)
        assert {table.get(fh) for fh in held} == {2}
