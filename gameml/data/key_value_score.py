"""
Per-example scores keyed by unique id.

Two KeyValueScores combine with key-wise addition under outer join semantics:
an id present on only one side keeps its value, as if the other side were 0.
"""
from typing import Dict, Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from .game_datum import UID_INDEX_NAME


class KeyValueScore:
    """Scores for a set of examples, backed by a float64 Series indexed by uid."""

    def __init__(self, scores: pd.Series):
        self._scores = pd.Series(
            scores.to_numpy(dtype=np.float64),
            index=pd.Index(scores.index.to_numpy(dtype=np.int64), name=UID_INDEX_NAME),
            name="score",
        )

    @classmethod
    def empty(cls) -> "KeyValueScore":
        return cls(pd.Series([], index=pd.Index([], dtype="int64"), dtype="float64"))

    @classmethod
    def from_arrays(cls, uids: Iterable[int], values: Iterable[float]) -> "KeyValueScore":
        uids = np.asarray(list(uids), dtype=np.int64)
        values = np.asarray(list(values), dtype=np.float64)
        if uids.shape != values.shape:
            raise ValueError(f"uids and values differ in length: {uids.shape} vs {values.shape}")
        return cls(pd.Series(values, index=uids))

    @classmethod
    def from_dict(cls, scores: Mapping[int, float]) -> "KeyValueScore":
        return cls.from_arrays(scores.keys(), scores.values())

    @property
    def scores(self) -> pd.Series:
        return self._scores.copy()

    def __len__(self) -> int:
        return len(self._scores)

    def __contains__(self, uid: int) -> bool:
        return uid in self._scores.index

    def get(self, uid: int, default: Optional[float] = None) -> Optional[float]:
        if uid in self._scores.index:
            return float(self._scores.loc[uid])
        return default

    def to_dict(self) -> Dict[int, float]:
        return {int(uid): float(v) for uid, v in self._scores.items()}

    def __add__(self, other: "KeyValueScore") -> "KeyValueScore":
        if not isinstance(other, KeyValueScore):
            return NotImplemented
        return KeyValueScore(self._scores.add(other._scores, fill_value=0.0))

    def __sub__(self, other: "KeyValueScore") -> "KeyValueScore":
        if not isinstance(other, KeyValueScore):
            return NotImplemented
        return KeyValueScore(self._scores.sub(other._scores, fill_value=0.0))

    def approx_equals(self, other: "KeyValueScore", atol: float = 1e-9) -> bool:
        """Same ids, and values equal within an absolute tolerance."""
        left = self._scores.sort_index()
        right = other._scores.sort_index()
        if not left.index.equals(right.index):
            return False
        return bool(np.allclose(left.to_numpy(), right.to_numpy(), rtol=0.0, atol=atol))

    def __eq__(self, other) -> bool:
        if not isinstance(other, KeyValueScore):
            return NotImplemented
        return self.approx_equals(other, atol=0.0)

    __hash__ = None

    def __repr__(self) -> str:
        return f"KeyValueScore(n={len(self)})"
