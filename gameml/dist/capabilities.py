"""
Optional resource capabilities of a sub-model.

RDDLike and BroadcastLike are independent: a sub-model may implement none,
one or both. Callers detect them with isinstance and call only what applies.
"""
from abc import ABC, abstractmethod

from .storage import StorageLevel


class RDDLike(ABC):
    """Backed by a cacheable dataset that must be persisted/unpersisted explicitly."""

    @abstractmethod
    def persist_rdd(self, storage_level: StorageLevel) -> "RDDLike":
        """Cache the backing data. Calling it on already cached data is a no-op."""

    @abstractmethod
    def unpersist_rdd(self) -> "RDDLike":
        """Drop the cached data. Calling it on uncached data is a no-op."""

    @property
    @abstractmethod
    def is_persisted(self) -> bool:
        ...


class BroadcastLike(ABC):
    """Backed by a broadcast value that must be released explicitly."""

    @abstractmethod
    def unpersist_broadcast(self) -> "BroadcastLike":
        """Release the broadcast value. Safe to call more than once."""
