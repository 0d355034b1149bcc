"""Tests for scoring data validation."""
import numpy as np

from gameml.data.data_validator import WARN_TOTAL_SAMPLES, ValidationResult, validate_scoring_data
from gameml.data.game_datum import GameDataset, GameDatum
from gameml.models.coefficients import Coefficients
from gameml.models.fixed_effect import FixedEffectModel
from gameml.models.game_model import GAMEModel
from gameml.models.random_effect import RandomEffectModel
from gameml.task_type import TaskType


def _make_dataset(n=WARN_TOTAL_SAMPLES, users=("u1", "u2"), global_dim=2):
    return GameDataset({
        i: GameDatum(
            response=1.0,
            feature_shard_container={"global": np.ones(global_dim), "user": np.ones(1)},
            id_tag_to_value_map={"userId": users[i % len(users)]},
        )
        for i in range(n)
    })


def _make_game():
    return GAMEModel({
        "fixed": FixedEffectModel(Coefficients([1.0, 2.0]), "global", TaskType.LINEAR_REGRESSION),
        "random": RandomEffectModel(
            {"u1": Coefficients([1.0]), "u2": Coefficients([2.0])}, "userId", "user",
            TaskType.LINEAR_REGRESSION,
        ),
    })


class TestValidateScoringData:
    def test_valid_data(self):
        result = validate_scoring_data(_make_dataset(), _make_game())
        assert isinstance(result, ValidationResult)
        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []
        assert result.shard_dimensions == {"global": 2, "user": 1}

    def test_empty_data(self):
        result = validate_scoring_data(GameDataset({}), _make_game())
        assert result.is_valid is False
        assert any("at least" in e for e in result.errors)

    def test_wrong_dimension(self):
        result = validate_scoring_data(_make_dataset(global_dim=3), _make_game())
        assert result.is_valid is False
        assert any("expects 2 features" in e for e in result.errors)

    def test_missing_shard(self):
        dataset = GameDataset({0: GameDatum(1.0, {"user": np.ones(1)}, {"userId": "u1"})})
        result = validate_scoring_data(dataset, _make_game())
        assert result.is_valid is False
        assert any("needs shard 'global'" in e for e in result.errors)

    def test_missing_id_tag(self):
        dataset = GameDataset({0: GameDatum(1.0, {"global": np.ones(2), "user": np.ones(1)})})
        result = validate_scoring_data(dataset, _make_game())
        assert result.is_valid is False
        assert any("needs id tag 'userId'" in e for e in result.errors)

    def test_unseen_entities_warn(self):
        result = validate_scoring_data(_make_dataset(users=("new1", "new2", "u1")), _make_game())
        assert result.is_valid is True
        assert any("unseen 'userId'" in w for w in result.warnings)

    def test_few_samples_warn(self):
        result = validate_scoring_data(_make_dataset(n=5), _make_game())
        assert result.is_valid is True
        assert any("noisy" in w for w in result.warnings)

    def test_single_sub_model(self):
        model = FixedEffectModel(Coefficients([1.0, 2.0]), "global", TaskType.LINEAR_REGRESSION)
        assert validate_scoring_data(_make_dataset(), model).is_valid is True

    def test_summary(self):
        result = validate_scoring_data(_make_dataset(n=5, global_dim=3), _make_game())
        summary = result.summary()
        assert "Samples: 5" in summary
        assert "Errors:" in summary
        assert "Warnings:" in summary
