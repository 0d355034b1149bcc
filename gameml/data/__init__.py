from .game_datum import GameDatum, GameDataset, UID_INDEX_NAME
from .key_value_score import KeyValueScore
from .data_validator import validate_scoring_data, ValidationResult

__all__ = [
    "GameDatum",
    "GameDataset",
    "UID_INDEX_NAME",
    "KeyValueScore",
    "validate_scoring_data",
    "ValidationResult",
]
