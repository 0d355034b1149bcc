"""
game-ml: generalized additive mixed effect models.
"""
from .errors import BroadcastDestroyedError, ConfigurationError, UnsupportedOperationError
from .task_type import TaskType

__version__ = "0.1.0"
