"""
Read-only value shared by every scoring task of a sub-model.
"""
import logging
from typing import Generic, Optional, TypeVar

from ..errors import BroadcastDestroyedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Broadcast(Generic[T]):
    """Handle to a shared value.

    `unpersist()` releases the shared copy; the value can still be read because
    the handle keeps the source. `destroy()` drops the source as well, after
    which reading the value raises BroadcastDestroyedError.
    """

    def __init__(self, value: T):
        self._source: Optional[T] = value
        self._shared: Optional[T] = value
        self._destroyed = False

    @property
    def value(self) -> T:
        if self._destroyed:
            raise BroadcastDestroyedError("Attempted to use a broadcast after it was destroyed")
        if self._shared is None:
            # Re-share lazily after unpersist
            self._shared = self._source
        return self._shared

    @property
    def is_shared(self) -> bool:
        return self._shared is not None

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def unpersist(self) -> None:
        if self._shared is not None:
            logger.debug("Releasing shared copy of broadcast %x", id(self))
        self._shared = None

    def destroy(self) -> None:
        self.unpersist()
        self._source = None
        self._destroyed = True
