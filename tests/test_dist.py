"""Tests for broadcast handles and cached frames."""
import gc
import os

import pandas as pd
import pytest

from gameml.dist.broadcast import Broadcast
from gameml.dist.cached_frame import CachedFrame
from gameml.dist.storage import StorageLevel
from gameml.errors import BroadcastDestroyedError


class _CountingBuilder:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return pd.DataFrame({"x": [1.0, 2.0, 3.0]})


class TestBroadcast:
    def test_value(self):
        assert Broadcast([1, 2]).value == [1, 2]

    def test_unpersist_is_idempotent(self):
        b = Broadcast("v")
        b.unpersist()
        b.unpersist()
        assert not b.is_shared
        assert b.value == "v"
        assert b.is_shared

    def test_destroy(self):
        b = Broadcast("v")
        b.destroy()
        assert b.is_destroyed
        with pytest.raises(BroadcastDestroyedError):
            _ = b.value


class TestCachedFrame:
    def test_uncached_rebuilds(self):
        builder = _CountingBuilder()
        frame = CachedFrame(builder)
        frame.get()
        frame.get()
        assert builder.calls == 2
        assert not frame.is_cached

    def test_memory_cache(self):
        builder = _CountingBuilder()
        frame = CachedFrame(builder).persist(StorageLevel.MEMORY_ONLY)
        frame.get()
        frame.get()
        assert builder.calls == 1
        assert frame.storage_level is StorageLevel.MEMORY_ONLY

    def test_persist_twice_keeps_first_level(self):
        builder = _CountingBuilder()
        frame = CachedFrame(builder)
        frame.persist(StorageLevel.MEMORY_ONLY)
        frame.persist(StorageLevel.DISK_ONLY)
        assert frame.storage_level is StorageLevel.MEMORY_ONLY
        assert builder.calls == 1

    def test_disk_cache_cleanup(self):
        builder = _CountingBuilder()
        frame = CachedFrame(builder).persist(StorageLevel.DISK_ONLY)
        path = frame._disk_path
        assert os.path.exists(path)
        pd.testing.assert_frame_equal(frame.get(), builder())

        frame.unpersist()
        assert not os.path.exists(path)
        assert not frame.is_cached

    def test_unpersist_uncached_is_noop(self):
        frame = CachedFrame(_CountingBuilder())
        assert frame.unpersist() is frame
        assert frame.storage_level is StorageLevel.NONE

    def test_persist_none_is_noop(self):
        frame = CachedFrame(_CountingBuilder()).persist(StorageLevel.NONE)
        assert not frame.is_cached

    def test_disk_cache_removed_when_collected(self):
        """Dropping a disk-persisted frame without unpersist removes its file."""
        frame = CachedFrame(_CountingBuilder()).persist(StorageLevel.MEMORY_AND_DISK)
        path = frame._disk_path
        assert os.path.exists(path)

        del frame
        gc.collect()
        assert not os.path.exists(path)
