"""
Generalized additive mixed effect (GAME) model.

A GAME model is a named collection of sub-models (fixed effect, random effect,
booster, ...) that were trained for the same task type. Its score for an
example is the sum of the sub-models' scores, before any link function.

GAME models are values: `update_model` returns a new instance that shares the
untouched sub-models with the original.
"""
import logging
from functools import reduce
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..data.game_datum import GameDataset
from ..data.key_value_score import KeyValueScore
from ..dist.capabilities import BroadcastLike, RDDLike
from ..dist.storage import DEFAULT_STORAGE_LEVEL, StorageLevel
from ..errors import ConfigurationError, UnsupportedOperationError
from ..task_type import TaskType
from .datum_scoring_model import DatumScoringModel

logger = logging.getLogger(__name__)


def determine_task_type(models: Mapping[str, DatumScoringModel]) -> TaskType:
    """Determine the task type of a GAME model.

    A GAME model may hold many sub-models, but they must all share one task
    type.

    Args:
        models: model name -> sub-model.

    Returns:
        The single task type of all sub-models.

    Raises:
        ConfigurationError: If the sub-models report zero or several task types.
    """
    task_types = {model.task_type for model in models.values()}
    if len(task_types) != 1:
        listed = ", ".join(sorted(str(t) for t in task_types))
        raise ConfigurationError(f"GAME model has multiple model types:\n{listed}")
    return next(iter(task_types))


class GAMEModel(DatumScoringModel):
    """Named collection of sub-models scored additively."""
    variant = "game"

    def __init__(self, models: Mapping[str, DatumScoringModel]):
        """
        Args:
            models: model name -> sub-model making up the GAME model.

        Raises:
            ConfigurationError: If the sub-models do not share exactly one task type.
        """
        self._models: Dict[str, DatumScoringModel] = dict(models)
        self._task_type = determine_task_type(self._models)

    @classmethod
    def of(cls, *sections: Tuple[str, DatumScoringModel]) -> "GAMEModel":
        """Build a GAME model from (name, model) pairs."""
        return cls(dict(sections))

    @classmethod
    def _derived(cls, models: Dict[str, DatumScoringModel], task_type: TaskType) -> "GAMEModel":
        # Skips determine_task_type; the caller vouches for task_type
        instance = cls.__new__(cls)
        instance._models = models
        instance._task_type = task_type
        return instance

    @property
    def task_type(self) -> TaskType:
        return self._task_type

    def get_model(self, name: str) -> Optional[DatumScoringModel]:
        """Get a sub-model by name, or None if the GAME model has no such sub-model."""
        return self._models.get(name)

    def update_model(self, name: str, model: DatumScoringModel) -> "GAMEModel":
        """Create a GAME model with sub-model `name` replaced (or added).

        The task type of the result is copied from this model instead of being
        recomputed; call `validate` on the result when the replacement may
        change it.

        Args:
            name: Name of the sub-model to replace.
            model: The new sub-model.

        Returns:
            A new GAME model. This instance is left unchanged.

        Raises:
            UnsupportedOperationError: If `name` exists and holds a different variant.
        """
        old_model = self._models.get(name)
        if old_model is not None and old_model.variant != model.variant:
            raise UnsupportedOperationError(
                f"Update model of {old_model.variant} ({type(old_model).__name__}) to model of "
                f"{model.variant} ({type(model).__name__}) is not supported"
            )

        models = dict(self._models)
        models[name] = model
        logger.debug("Updated sub-model '%s' (%s)", name, "replaced" if old_model is not None else "added")
        return type(self)._derived(models, self._task_type)

    def validate(self) -> "GAMEModel":
        """Re-check that all sub-models share the cached task type.

        Raises:
            ConfigurationError: If the sub-models disagree with each other or
                with the cached task type.
        """
        actual = determine_task_type(self._models)
        if actual != self._task_type:
            raise ConfigurationError(
                f"GAME model has multiple model types:\n{self._task_type}, {actual}"
            )
        return self

    def to_map(self) -> Mapping[str, DatumScoringModel]:
        """Read-only (name -> model) view of the sub-models."""
        return MappingProxyType(self._models)

    def to_sorted_map(self) -> Dict[str, DatumScoringModel]:
        """(name -> model) map with sub-models in name order."""
        return {name: self._models[name] for name in sorted(self._models)}

    def items(self) -> Iterable[Tuple[str, DatumScoringModel]]:
        return self._models.items()

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def persist(self, storage_level: StorageLevel = DEFAULT_STORAGE_LEVEL) -> "GAMEModel":
        """Persist every RDD-like sub-model at the given storage level.

        Returns:
            This GAME model.
        """
        for name, model in self._models.items():
            if isinstance(model, RDDLike):
                logger.debug("Persisting sub-model '%s' at %s", name, storage_level.value)
                model.persist_rdd(storage_level)
        return self

    def unpersist(self) -> "GAMEModel":
        """Unpersist RDD-like sub-models and release broadcast-like ones.

        A sub-model that is both gets both calls.

        Returns:
            This GAME model.
        """
        for name, model in self._models.items():
            if isinstance(model, RDDLike):
                logger.debug("Unpersisting sub-model '%s'", name)
                model.unpersist_rdd()
            if isinstance(model, BroadcastLike):
                logger.debug("Releasing broadcast of sub-model '%s'", name)
                model.unpersist_broadcast()
        return self

    def score(self, dataset: GameDataset) -> KeyValueScore:
        """Sum the scores of all sub-models, PRIOR to any link function.

        Args:
            dataset: Examples to score, keyed by unique id.

        Returns:
            The summed score. Ids missing from a sub-model's scores count as 0
            for that sub-model.
        """
        scores = [model.score(dataset) for model in self._models.values()]
        if not scores:
            return KeyValueScore.empty()
        return reduce(lambda left, right: left + right, scores)

    def to_summary_string(self) -> str:
        return "\n".join(
            f"Model name: {name}, summary:\n{model.to_summary_string()}\n"
            for name, model in self.to_sorted_map().items()
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, GAMEModel):
            return NotImplemented
        if self._task_type != other._task_type:
            return False
        if self._models.keys() != other._models.keys():
            return False
        return all(model == other._models[name] for name, model in self._models.items())

    __hash__ = None

    def __repr__(self) -> str:
        return f"GAMEModel(task_type={self._task_type}, models={sorted(self._models)})"
