from .datum_scoring_model import DatumScoringModel
from .coefficients import Coefficients
from .fixed_effect import FixedEffectModel
from .random_effect import RandomEffectModel
from .game_model import GAMEModel, determine_task_type

__all__ = [
    "DatumScoringModel",
    "Coefficients",
    "FixedEffectModel",
    "RandomEffectModel",
    "GAMEModel",
    "determine_task_type",
]
