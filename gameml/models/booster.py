"""
Boosted-tree sub-model wrapping a saved GPBoost or LightGBM booster.

GPBoost mode (random_effect_type set):
  Fixed effects (trees) + random intercept per group, where the group of an
  example is read from its id tag. Unknown groups get a random effect of 0.

LightGBM mode (random_effect_type None):
  Pure fixed effects.

The booster's raw output is used as the score; the link function is left to
the caller, like every other sub-model.
"""
import json
import logging
import os
from typing import List, Optional

import gpboost as gpb
import lightgbm as lgb
import numpy as np

from ..data.game_datum import GameDataset
from ..data.key_value_score import KeyValueScore
from ..task_type import TaskType
from .datum_scoring_model import DatumScoringModel

logger = logging.getLogger(__name__)


class BoosterModel(DatumScoringModel):
    """Wrapper around a trained GPBoost/LightGBM booster used as a GAME sub-model."""
    variant = "booster"

    def __init__(
        self,
        model_path: str,
        feature_shard_id: str,
        task_type: TaskType,
        random_effect_type: Optional[str] = None,
        metadata_path: Optional[str] = None,
    ):
        """Load model from file.

        Args:
            model_path: Path to model file saved with `Booster.save_model`.
            feature_shard_id: Feature shard the booster was trained on.
            task_type: Task type the booster was trained for.
            random_effect_type: Id tag holding the group of each example.
                Loads the model with GPBoost when set, LightGBM otherwise.
            metadata_path: Optional path to metadata .json file.

        Raises:
            FileNotFoundError: If model file doesn't exist.
        """
        if not os.path.exists(model_path):
            raise FileNotFoundError(f"Model file not found: {model_path}")

        self.model_path = model_path
        self.feature_shard_id = feature_shard_id
        self.random_effect_type = random_effect_type
        self._task_type = task_type
        self.metadata: Optional[dict] = None
        self.feature_names: Optional[List[str]] = None

        if metadata_path and os.path.exists(metadata_path):
            with open(metadata_path, "r", encoding="utf-8") as f:
                self.metadata = json.load(f)
            self.feature_names = self.metadata.get("feature_names")
            if self.random_effect_type is None:
                self.random_effect_type = self.metadata.get("random_effect_type")

        if self.random_effect_type:
            self.model = gpb.Booster(model_file=model_path)
        else:
            self.model = lgb.Booster(model_file=model_path)
        logger.debug("Loaded %s booster from %s",
                     "GPBoost" if self.random_effect_type else "LightGBM", model_path)

    @property
    def task_type(self) -> TaskType:
        return self._task_type

    def predict_raw(self, features: np.ndarray, group_data: Optional[np.ndarray] = None) -> np.ndarray:
        """Predict with the model.

        Args:
            features: Feature array of shape (n_samples, n_features).
            group_data: Group array of shape (n_samples,).
                        Used only in random intercept mode.

        Returns:
            Array of raw predictions.
        """
        if features.ndim == 1:
            features = features.reshape(1, -1)
        if self.random_effect_type:
            # Latent scale: trees plus random effect, before the likelihood's link
            pred_dict = self.model.predict(data=features, group_data_pred=group_data, pred_latent=True)
            return np.asarray(pred_dict["fixed_effect"]) + np.asarray(pred_dict["random_effect_mean"])
        return np.asarray(self.model.predict(features, raw_score=True))

    def score(self, dataset: GameDataset) -> KeyValueScore:
        if len(dataset) == 0:
            return KeyValueScore.empty()
        features = dataset.feature_matrix(self.feature_shard_id)
        groups = dataset.id_tag_values(self.random_effect_type) if self.random_effect_type else None
        return KeyValueScore.from_arrays(dataset.uids, self.predict_raw(features, groups))

    def to_summary_string(self) -> str:
        kind = f"GPBoost, random effect '{self.random_effect_type}'" if self.random_effect_type else "LightGBM"
        lines = [
            f"Booster model ({kind}) "
            f"of task type {self._task_type} on shard '{self.feature_shard_id}':",
            f"Path:   {self.model_path}",
            f"Trees:  {self.model.num_trees()}",
        ]
        if self.feature_names:
            lines.append(f"Features: {len(self.feature_names)}")
        return "\n".join(lines)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoosterModel):
            return NotImplemented
        return (
            self._task_type == other._task_type
            and self.feature_shard_id == other.feature_shard_id
            and self.random_effect_type == other.random_effect_type
            and self.model.model_to_string() == other.model.model_to_string()
        )

    __hash__ = None
