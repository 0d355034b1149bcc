"""
Data validation before scoring.

Checks that a dataset carries what a model needs (feature shards of the right
width, id tags for random effects), providing clear error messages instead of
failing half-way through scoring.
"""
from dataclasses import dataclass, field
from typing import Dict, List

from .game_datum import GameDataset

MIN_TOTAL_SAMPLES = 1
WARN_TOTAL_SAMPLES = 100
WARN_UNKNOWN_ENTITY_RATIO = 0.5


@dataclass
class ValidationResult:
    """Result of scoring data validation."""
    is_valid: bool
    total_samples: int
    shard_dimensions: Dict[str, int]
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def summary(self) -> str:
        lines = [f"Samples: {self.total_samples}"]
        for name, dim in sorted(self.shard_dimensions.items()):
            lines.append(f"  {name}: {dim} features")
        if self.errors:
            lines.append("Errors:")
            for e in self.errors:
                lines.append(f"  - {e}")
        if self.warnings:
            lines.append("Warnings:")
            for w in self.warnings:
                lines.append(f"  - {w}")
        return "\n".join(lines)


def _required_inputs(model) -> List[tuple]:
    """(name, shard id, expected dim or None, id tag or None, entity ids or None) per sub-model."""
    # Imported here to keep the data layer free of model imports at module load
    from ..models.fixed_effect import FixedEffectModel
    from ..models.game_model import GAMEModel
    from ..models.random_effect import RandomEffectModel

    sub_models = model.to_sorted_map().items() if isinstance(model, GAMEModel) else [("model", model)]
    required = []
    for name, sub in sub_models:
        shard = getattr(sub, "feature_shard_id", None)
        if shard is None:
            continue
        dim = None
        entities = None
        if isinstance(sub, FixedEffectModel):
            dim = sub.coefficients.dimension
        elif isinstance(sub, RandomEffectModel):
            models = sub.models_by_entity
            entities = set(models)
            if models:
                dim = next(iter(models.values())).dimension
        elif getattr(sub, "feature_names", None):
            dim = len(sub.feature_names)
        required.append((name, shard, dim, getattr(sub, "random_effect_type", None), entities))
    return required


def validate_scoring_data(dataset: GameDataset, model) -> ValidationResult:
    """Validate that a dataset can be scored by a model.

    Args:
        dataset: Examples to score.
        model: A GAMEModel or a single sub-model.

    Returns:
        ValidationResult with is_valid flag, shard dimensions, warnings, and errors.
    """
    errors: List[str] = []
    warnings: List[str] = []
    total = len(dataset)
    datums = [datum for _, datum in dataset.items()]

    shard_dims: Dict[str, int] = {}
    if datums:
        for shard_id, vec in datums[0].feature_shard_container.items():
            shard_dims[shard_id] = int(len(vec))

    if total < MIN_TOTAL_SAMPLES:
        errors.append(f"Need at least {MIN_TOTAL_SAMPLES} sample(s) to score, got {total}.")
    elif total < WARN_TOTAL_SAMPLES:
        warnings.append(f"Only {total} samples — evaluation metrics may be noisy.")

    for name, shard, dim, id_tag, entities in _required_inputs(model):
        missing_shard = sum(1 for d in datums if shard not in d.feature_shard_container)
        if missing_shard:
            errors.append(f"Model '{name}' needs shard '{shard}', missing in {missing_shard} sample(s).")
        elif dim is not None:
            bad = sum(1 for d in datums if len(d.feature_shard_container[shard]) != dim)
            if bad:
                errors.append(
                    f"Model '{name}' expects {dim} features in shard '{shard}', "
                    f"{bad} sample(s) have a different width."
                )

        if id_tag:
            missing_tag = sum(1 for d in datums if id_tag not in d.id_tag_to_value_map)
            if missing_tag:
                errors.append(f"Model '{name}' needs id tag '{id_tag}', missing in {missing_tag} sample(s).")
            elif entities is not None and datums:
                unknown = sum(1 for d in datums if d.id_tag_to_value_map[id_tag] not in entities)
                if unknown / total > WARN_UNKNOWN_ENTITY_RATIO:
                    warnings.append(
                        f"Model '{name}': {unknown}/{total} samples have an unseen '{id_tag}' "
                        f"and get no random effect."
                    )

    return ValidationResult(
        is_valid=len(errors) == 0,
        total_samples=total,
        shard_dimensions=shard_dims,
        warnings=warnings,
        errors=errors,
    )
