"""Tests for the shared reader/writer lock."""

from __future__ import annotations

import threading
import time

import pytest

from packages.switchyard_shared.locks import ReadWriteLock


def test_readers_share_the_lock() -> None:
    lock = ReadWriteLock()
    inside = threading.Barrier(3, timeout=2.0)

    def reader() -> None:
        with lock.read():
            inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for thread in threads:
        thread.start()
    inside.wait()
    for thread in threads:
        thread.join()

    assert lock.readers == 0


def test_writer_excludes_readers() -> None:
    lock = ReadWriteLock()
    events: list[str] = []
    lock.acquire_write()

    def reader() -> None:
        with lock.read():
            events.append("read")

    thread = threading.Thread(target=reader)
    thread.start()
    time.sleep(0.05)
    events.append("write-done")
    lock.release_write()
    thread.join()

    assert events == ["write-done", "read"]
    assert not lock.writer_active


def test_release_without_acquire_is_an_error() -> None:
    lock = ReadWriteLock()

    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()
