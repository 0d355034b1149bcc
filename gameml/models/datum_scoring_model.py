"""
Interface shared by every model that can score a GameDataset.
"""
from abc import ABC, abstractmethod

from ..data.game_datum import GameDataset
from ..data.key_value_score import KeyValueScore
from ..task_type import TaskType


class DatumScoringModel(ABC):
    """A model that produces one raw score per example.

    Subclasses set `variant` to a tag naming their concrete kind. Two models
    are interchangeable inside a GAME model only when their tags match.
    """
    variant: str = "abstract"

    @property
    @abstractmethod
    def task_type(self) -> TaskType:
        ...

    @abstractmethod
    def score(self, dataset: GameDataset) -> KeyValueScore:
        """Compute scores PRIOR to any link function, keyed by unique id."""

    @abstractmethod
    def to_summary_string(self) -> str:
        ...
