"""
Scored data for GAME models.

A GameDatum is one input example: its response, offset and weight, a set of
named feature shards (dense vectors, one per feature bag) and a set of id tags
used by random-effect sub-models to pick the entity that owns the example.

A GameDataset is the collection fed to scoring, keyed by a unique int64 id.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

UID_INDEX_NAME = "uid"


@dataclass(frozen=True, eq=False)
class GameDatum:
    """One immutable input example."""
    response: float
    feature_shard_container: Dict[str, np.ndarray]
    id_tag_to_value_map: Dict[str, str] = field(default_factory=dict)
    offset: float = 0.0
    weight: float = 1.0

    def features(self, feature_shard_id: str) -> np.ndarray:
        """Return the feature vector of one shard.

        Raises:
            KeyError: If the datum carries no such shard.
        """
        try:
            return self.feature_shard_container[feature_shard_id]
        except KeyError:
            raise KeyError(f"Datum has no feature shard '{feature_shard_id}'") from None

    def id_tag(self, id_tag: str) -> str:
        try:
            return self.id_tag_to_value_map[id_tag]
        except KeyError:
            raise KeyError(f"Datum has no id tag '{id_tag}'") from None


class GameDataset:
    """Collection of (unique id, GameDatum) pairs backed by a pandas Series."""

    def __init__(self, datums: Mapping[int, GameDatum]):
        uids = pd.Index([int(uid) for uid in datums.keys()], dtype="int64", name=UID_INDEX_NAME)
        self._data = pd.Series(list(datums.values()), index=uids, dtype=object)

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        feature_shards: Mapping[str, List[str]],
        id_tag_columns: Optional[List[str]] = None,
        response_column: Optional[str] = "response",
        offset_column: Optional[str] = None,
        weight_column: Optional[str] = None,
        uid_column: Optional[str] = None,
    ) -> "GameDataset":
        """Build a dataset from a flat DataFrame.

        Args:
            df: One row per example.
            feature_shards: shard id -> ordered list of columns forming that shard.
            id_tag_columns: Columns copied (as strings) into each datum's id tags.
            response_column: Response column; missing column means response 0.
            offset_column: Optional offset column.
            weight_column: Optional weight column.
            uid_column: Column holding unique ids; the row position is used if None.

        Returns:
            GameDataset with one datum per row.

        Raises:
            KeyError: If a named column does not exist.
            ValueError: If unique ids repeat.
        """
        id_tag_columns = list(id_tag_columns or [])
        if uid_column is not None:
            uids = df[uid_column].astype("int64").to_numpy()
        else:
            uids = np.arange(len(df), dtype=np.int64)
        if len(np.unique(uids)) != len(uids):
            raise ValueError("Unique ids must not repeat")

        shard_arrays = {
            shard_id: df[columns].to_numpy(dtype=np.float64)
            for shard_id, columns in feature_shards.items()
        }
        responses = (
            df[response_column].to_numpy(dtype=np.float64)
            if response_column and response_column in df.columns
            else np.zeros(len(df))
        )
        offsets = df[offset_column].to_numpy(dtype=np.float64) if offset_column else np.zeros(len(df))
        weights = df[weight_column].to_numpy(dtype=np.float64) if weight_column else np.ones(len(df))
        id_tags = {col: df[col].astype(str).to_numpy() for col in id_tag_columns}

        datums: Dict[int, GameDatum] = {}
        for row, uid in enumerate(uids):
            datums[int(uid)] = GameDatum(
                response=float(responses[row]),
                feature_shard_container={s: arr[row] for s, arr in shard_arrays.items()},
                id_tag_to_value_map={col: str(vals[row]) for col, vals in id_tags.items()},
                offset=float(offsets[row]),
                weight=float(weights[row]),
            )

        logger.debug("Built dataset: %d rows, shards=%s, id tags=%s",
                     len(datums), list(feature_shards), id_tag_columns)
        return cls(datums)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Tuple[int, GameDatum]]:
        return self.items()

    def __getitem__(self, uid: int) -> GameDatum:
        return self._data.loc[uid]

    def items(self) -> Iterator[Tuple[int, GameDatum]]:
        for uid, datum in self._data.items():
            yield int(uid), datum

    @property
    def uids(self) -> np.ndarray:
        return self._data.index.to_numpy(dtype=np.int64)

    def feature_matrix(self, feature_shard_id: str) -> np.ndarray:
        """Stack one shard of every datum into an (n_samples, n_features) matrix."""
        if len(self._data) == 0:
            return np.empty((0, 0))
        return np.vstack([datum.features(feature_shard_id) for datum in self._data])

    def id_tag_values(self, id_tag: str) -> np.ndarray:
        return np.array([datum.id_tag(id_tag) for datum in self._data], dtype=object)

    def responses(self) -> np.ndarray:
        return np.array([datum.response for datum in self._data], dtype=np.float64)

    def weights(self) -> np.ndarray:
        return np.array([datum.weight for datum in self._data], dtype=np.float64)
