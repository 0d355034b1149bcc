"""
Feature name <-> feature index maps.

Index maps are read-only Mappings from feature name to column index.
"""
from abc import abstractmethod
from collections.abc import Mapping
from typing import Iterator, List, Optional

INTERCEPT_KEY = "(INTERCEPT)"


class IndexMap(Mapping):
    """Read-only feature name -> index map."""

    NULL_KEY = -1

    @abstractmethod
    def get_index(self, name: str) -> int:
        """Index of feature `name`, or NULL_KEY if unknown."""

    @abstractmethod
    def get_feature_name(self, idx: int) -> Optional[str]:
        """Name of feature `idx`, or None if out of range."""

    def __getitem__(self, name: str) -> int:
        idx = self.get_index(name)
        if idx == self.NULL_KEY:
            raise KeyError(name)
        return idx

    def __setitem__(self, name, value):
        raise TypeError("Operation not supported")

    def __delitem__(self, name):
        raise TypeError("Operation not supported")


class IdentityIndexMap(IndexMap):
    """Features named by their own index ("0", "1", ...).

    With intercept enabled, the last index is the intercept.
    """

    def __init__(self, feature_dimension: int, use_intercept: bool = True):
        if feature_dimension < 0:
            raise ValueError(f"Feature dimension must be non-negative, got {feature_dimension}")
        self.feature_dimension = feature_dimension
        self.use_intercept = use_intercept

    def get_feature_name(self, idx: int) -> Optional[str]:
        d = self.feature_dimension
        if self.use_intercept and idx == d - 1:
            return INTERCEPT_KEY
        if 0 <= idx < d:
            return str(idx)
        return None

    def get_index(self, name: str) -> int:
        d = self.feature_dimension
        if self.use_intercept and name == INTERCEPT_KEY:
            return d - 1 if d > 0 else self.NULL_KEY
        try:
            idx = int(name)
        except (TypeError, ValueError):
            return self.NULL_KEY
        return idx if 0 <= idx < d else self.NULL_KEY

    def __iter__(self) -> Iterator[str]:
        for idx in range(self.feature_dimension):
            yield self.get_feature_name(idx)

    def __len__(self) -> int:
        return self.feature_dimension


class DefaultIndexMap(IndexMap):
    """Index map over an explicit, ordered list of feature names."""

    def __init__(self, feature_names: List[str], add_intercept: bool = False):
        names = list(feature_names)
        if add_intercept and INTERCEPT_KEY not in names:
            names.append(INTERCEPT_KEY)
        if len(set(names)) != len(names):
            raise ValueError("Feature names must be unique")
        self._names = names
        self._indices = {name: i for i, name in enumerate(names)}

    def get_feature_name(self, idx: int) -> Optional[str]:
        if 0 <= idx < len(self._names):
            return self._names[idx]
        return None

    def get_index(self, name: str) -> int:
        return self._indices.get(name, self.NULL_KEY)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)
