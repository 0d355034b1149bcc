"""
Storage levels for cached model data.
"""
from enum import Enum


class StorageLevel(str, Enum):
    NONE = "none"
    MEMORY_ONLY = "memory_only"
    MEMORY_AND_DISK = "memory_and_disk"
    DISK_ONLY = "disk_only"


DEFAULT_STORAGE_LEVEL = StorageLevel.MEMORY_AND_DISK
