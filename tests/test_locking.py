"""Tests for the reader/writer lock."""

from __future__ import annotations

import threading
import time

import pytest

from paramstore.storage import ReadWriteLock


class TestReadWriteLock:
    """Tests for ReadWriteLock."""

    def test_readers_share_the_lock(self) -> None:
        lock = ReadWriteLock()
        barrier = threading.Barrier(3, timeout=5)
        errors: list[BaseException] = []

        def reader() -> None:
            try:
                with lock.read_locked():
                    barrier.wait()  # only passes if all three hold the lock together
            except BaseException as e:
                errors.append(e)

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert errors == []

    def test_writer_excludes_readers(self) -> None:
        lock = ReadWriteLock()
        events: list[str] = []
        writer_in = threading.Event()

        def writer() -> None:
            with lock.write_locked():
                writer_in.set()
                time.sleep(0.1)
                events.append("writer-done")

        def reader() -> None:
            writer_in.wait(timeout=5)
            with lock.read_locked():
                events.append("reader")

        w = threading.Thread(target=writer)
        r = threading.Thread(target=reader)
        w.start()
        r.start()
        w.join(timeout=5)
        r.join(timeout=5)

        assert events == ["writer-done", "reader"]

    def test_writers_are_serialized(self) -> None:
        lock = ReadWriteLock()
        active = 0
        max_active = 0
        guard = threading.Lock()

        def writer() -> None:
            nonlocal active, max_active
            with lock.write_locked():
                with guard:
                    active += 1
                    max_active = max(max_active, active)
                time.sleep(0.01)
                with guard:
                    active -= 1

        threads = [threading.Thread(target=writer) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert max_active == 1

    def test_waiting_writer_blocks_new_readers(self) -> None:
        lock = ReadWriteLock()
        order: list[str] = []
        lock.acquire_read()

        def writer() -> None:
            with lock.write_locked():
                order.append("writer")

        def late_reader() -> None:
            with lock.read_locked():
                order.append("late-reader")

        w = threading.Thread(target=writer)
        w.start()
        time.sleep(0.05)  # writer is now waiting on the held read lock
        r = threading.Thread(target=late_reader)
        r.start()
        time.sleep(0.05)
        assert order == []

        lock.release_read()
        w.join(timeout=5)
        r.join(timeout=5)

        assert order == ["writer", "late-reader"]

    def test_lock_released_on_exception(self) -> None:
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError, match="boom"), lock.write_locked():
            raise RuntimeError("boom")

        with lock.read_locked():
            pass

    def test_unbalanced_release(self) -> None:
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError):
            lock.release_read()
        with pytest.raises(RuntimeError):
            lock.release_write()
