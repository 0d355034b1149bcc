"""
Random-effect sub-model: one coefficient vector per entity.

The entity owning an example is read from the example's id tag named by
`random_effect_type` (e.g. "userId"). Examples whose entity has no
coefficients get no score entry, which counts as 0 once merged.
"""
import logging
from typing import Dict, Mapping

import numpy as np
import pandas as pd

from ..data.game_datum import GameDataset
from ..data.key_value_score import KeyValueScore
from ..dist.cached_frame import CachedFrame
from ..dist.capabilities import RDDLike
from ..dist.storage import DEFAULT_STORAGE_LEVEL, StorageLevel
from ..task_type import TaskType
from .coefficients import Coefficients
from .datum_scoring_model import DatumScoringModel

logger = logging.getLogger(__name__)


class RandomEffectModel(DatumScoringModel, RDDLike):
    variant = "random_effect"

    def __init__(
        self,
        models_by_entity: Mapping[str, Coefficients],
        random_effect_type: str,
        feature_shard_id: str,
        task_type: TaskType,
    ):
        dims = {c.dimension for c in models_by_entity.values()}
        if len(dims) > 1:
            raise ValueError(f"Per-entity coefficients differ in dimension: {sorted(dims)}")

        self._models_by_entity: Dict[str, Coefficients] = dict(models_by_entity)
        self.random_effect_type = random_effect_type
        self.feature_shard_id = feature_shard_id
        self._task_type = task_type
        self._dimension = dims.pop() if dims else 0
        self.coefficients_frame = CachedFrame(
            self._build_frame, name=f"random_effect_{random_effect_type}_{feature_shard_id}",
        )

    def _build_frame(self) -> pd.DataFrame:
        """Entity id -> coefficient means, one column per feature index."""
        entity_ids = list(self._models_by_entity)
        if entity_ids:
            values = np.vstack([self._models_by_entity[e].means for e in entity_ids])
        else:
            values = np.empty((0, self._dimension))
        return pd.DataFrame(values, index=pd.Index(entity_ids, name=self.random_effect_type))

    @property
    def task_type(self) -> TaskType:
        return self._task_type

    @property
    def models_by_entity(self) -> Dict[str, Coefficients]:
        return dict(self._models_by_entity)

    def get_entity_model(self, entity_id: str):
        return self._models_by_entity.get(entity_id)

    def score(self, dataset: GameDataset) -> KeyValueScore:
        if len(dataset) == 0:
            return KeyValueScore.empty()

        entity_ids = dataset.id_tag_values(self.random_effect_type)
        frame = self.coefficients_frame.get()
        known = np.isin(entity_ids, frame.index.to_numpy())
        if not known.any():
            return KeyValueScore.empty()

        features = dataset.feature_matrix(self.feature_shard_id)[known]
        if features.shape[1] != frame.shape[1]:
            raise ValueError(
                f"Shard '{self.feature_shard_id}' has {features.shape[1]} features, "
                f"model expects {frame.shape[1]}"
            )
        coefficients = frame.loc[entity_ids[known]].to_numpy(dtype=np.float64)
        scores = np.einsum("ij,ij->i", features, coefficients)
        return KeyValueScore.from_arrays(dataset.uids[known], scores)

    def persist_rdd(self, storage_level: StorageLevel = DEFAULT_STORAGE_LEVEL) -> "RandomEffectModel":
        self.coefficients_frame.persist(storage_level)
        return self

    def unpersist_rdd(self) -> "RandomEffectModel":
        self.coefficients_frame.unpersist()
        return self

    @property
    def is_persisted(self) -> bool:
        return self.coefficients_frame.is_cached

    def to_summary_string(self) -> str:
        norms = [float(np.linalg.norm(c.means)) for c in self._models_by_entity.values()]
        lines = [
            f"Random effect model of type '{self.random_effect_type}' with task type {self._task_type} "
            f"on shard '{self.feature_shard_id}':",
            f"Entities:  {len(self._models_by_entity)}",
            f"Dimension: {self._dimension}",
        ]
        if norms:
            lines.append(
                f"L2 norm (min/mean/max): {min(norms):.6f} / {float(np.mean(norms)):.6f} / {max(norms):.6f}"
            )
        return "\n".join(lines)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RandomEffectModel):
            return NotImplemented
        return (
            self._task_type == other._task_type
            and self.random_effect_type == other.random_effect_type
            and self.feature_shard_id == other.feature_shard_id
            and self._models_by_entity == other._models_by_entity
        )

    __hash__ = None
