from .storage import StorageLevel, DEFAULT_STORAGE_LEVEL
from .capabilities import RDDLike, BroadcastLike
from .broadcast import Broadcast
from .cached_frame import CachedFrame

__all__ = [
    "StorageLevel",
    "DEFAULT_STORAGE_LEVEL",
    "RDDLike",
    "BroadcastLike",
    "Broadcast",
    "CachedFrame",
]
