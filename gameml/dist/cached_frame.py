"""
Lazily computed DataFrame that can be cached and uncached explicitly.

The frame is rebuilt from its builder on every access until `persist` is
called; afterwards the materialized frame is reused until `unpersist`.
"""
import logging
import os
import tempfile
import weakref
from typing import Callable, Optional

import pandas as pd

from .storage import StorageLevel

logger = logging.getLogger(__name__)


def _remove_file(path: str) -> None:
    if os.path.exists(path):
        os.remove(path)


class CachedFrame:

    def __init__(self, builder: Callable[[], pd.DataFrame], name: str = "frame"):
        self._builder = builder
        self.name = name
        self._storage_level = StorageLevel.NONE
        self._memory: Optional[pd.DataFrame] = None
        self._disk_path: Optional[str] = None
        # Removes the disk copy when the frame is collected without unpersist
        self._disk_finalizer: Optional[weakref.finalize] = None

    @property
    def storage_level(self) -> StorageLevel:
        return self._storage_level

    @property
    def is_cached(self) -> bool:
        return self._storage_level is not StorageLevel.NONE

    def get(self) -> pd.DataFrame:
        if self._memory is not None:
            return self._memory
        if self._disk_path is not None:
            frame = pd.read_pickle(self._disk_path)
            if self._storage_level is StorageLevel.MEMORY_AND_DISK:
                self._memory = frame
            return frame
        return self._builder()

    def persist(self, storage_level: StorageLevel) -> "CachedFrame":
        """Materialize the frame at the given level.

        Persisting an already cached frame keeps the existing level, matching
        the behaviour of caching layers that cannot change level in place.
        """
        if storage_level is StorageLevel.NONE:
            return self
        if self.is_cached:
            if storage_level is not self._storage_level:
                logger.warning("%s already persisted at %s, ignoring request for %s",
                               self.name, self._storage_level.value, storage_level.value)
            return self

        frame = self._builder()
        if storage_level is StorageLevel.MEMORY_ONLY:
            self._memory = frame
        else:
            fd, path = tempfile.mkstemp(prefix=f"{self.name}_", suffix=".pkl")
            os.close(fd)
            frame.to_pickle(path)
            self._disk_path = path
            self._disk_finalizer = weakref.finalize(self, _remove_file, path)
            if storage_level is StorageLevel.MEMORY_AND_DISK:
                self._memory = frame
        self._storage_level = storage_level
        logger.debug("Persisted %s (%d rows) at %s", self.name, len(frame), storage_level.value)
        return self

    def unpersist(self) -> "CachedFrame":
        if not self.is_cached:
            return self
        self._memory = None
        if self._disk_finalizer is not None:
            self._disk_finalizer()
            self._disk_finalizer = None
        self._disk_path = None
        logger.debug("Unpersisted %s", self.name)
        self._storage_level = StorageLevel.NONE
        return self
