"""
Fixed-effect sub-model: one global coefficient vector over a feature shard.
"""
import logging

import numpy as np

from ..data.game_datum import GameDataset
from ..data.key_value_score import KeyValueScore
from ..dist.broadcast import Broadcast
from ..dist.capabilities import BroadcastLike
from ..task_type import TaskType
from .coefficients import Coefficients
from .datum_scoring_model import DatumScoringModel

logger = logging.getLogger(__name__)


class FixedEffectModel(DatumScoringModel, BroadcastLike):
    """Scores every example against the same coefficients, held in a Broadcast."""
    variant = "fixed_effect"

    def __init__(self, coefficients: Coefficients, feature_shard_id: str, task_type: TaskType):
        self.coefficients_broadcast = Broadcast(coefficients)
        self.feature_shard_id = feature_shard_id
        self._task_type = task_type

    @property
    def task_type(self) -> TaskType:
        return self._task_type

    @property
    def coefficients(self) -> Coefficients:
        return self.coefficients_broadcast.value

    def score(self, dataset: GameDataset) -> KeyValueScore:
        if len(dataset) == 0:
            return KeyValueScore.empty()
        coefficients = self.coefficients
        features = dataset.feature_matrix(self.feature_shard_id)
        if features.shape[1] != coefficients.dimension:
            raise ValueError(
                f"Shard '{self.feature_shard_id}' has {features.shape[1]} features, "
                f"model expects {coefficients.dimension}"
            )
        return KeyValueScore.from_arrays(dataset.uids, features @ coefficients.means)

    def unpersist_broadcast(self) -> "FixedEffectModel":
        self.coefficients_broadcast.unpersist()
        return self

    def to_summary_string(self) -> str:
        return (
            f"Fixed effect model of task type {self._task_type} "
            f"on shard '{self.feature_shard_id}':\n{self.coefficients.to_summary_string()}"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, FixedEffectModel):
            return NotImplemented
        return (
            self._task_type == other._task_type
            and self.feature_shard_id == other.feature_shard_id
            and self.coefficients == other.coefficients
        )

    __hash__ = None
