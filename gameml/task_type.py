"""
Task types a GAME model (and each of its sub-models) can be trained for.
"""
from enum import Enum

from .errors import ConfigurationError


class TaskType(str, Enum):
    LINEAR_REGRESSION = "linear_regression"
    LOGISTIC_REGRESSION = "logistic_regression"
    POISSON_REGRESSION = "poisson_regression"
    SMOOTHED_HINGE_LOSS_LINEAR_SVM = "smoothed_hinge_loss_linear_svm"

    def __str__(self) -> str:
        return self.name

    @property
    def is_classification(self) -> bool:
        return self in (TaskType.LOGISTIC_REGRESSION, TaskType.SMOOTHED_HINGE_LOSS_LINEAR_SVM)

    @classmethod
    def parse(cls, name: str) -> "TaskType":
        """Resolve a task type from its value or enum name, case-insensitive.

        Raises:
            ConfigurationError: If the name matches no task type.
        """
        key = name.strip().lower()
        for task_type in cls:
            if key in (task_type.value, task_type.name.lower()):
                return task_type
        valid = ", ".join(t.value for t in cls)
        raise ConfigurationError(f"Unknown task type '{name}' (expected one of: {valid})")
