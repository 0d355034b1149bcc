"""
Score evaluation and metrics reporting.

Supports both task families:
  - Regression (linear / Poisson): RMSE, MAE, R², correlation
  - Classification (logistic / smoothed hinge): AUC, log loss, accuracy

Scores come in raw (before the link function); the link is applied here only
to compute metrics that need probabilities or means.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Dict

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    log_loss,
    mean_absolute_error,
    mean_squared_error,
    r2_score,
    roc_auc_score,
)

from ..data.game_datum import GameDataset
from ..data.key_value_score import KeyValueScore
from ..task_type import TaskType

logger = logging.getLogger(__name__)

SECTION_TITLE = "Model Analysis"


@dataclass
class ModelDiagnosticReport:
    """Validation metrics of one model on one dataset."""
    model_description: str
    task_type: TaskType
    metrics: Dict[str, float]
    test_samples: int
    unscored_samples: int = 0
    notes: Dict[str, str] = field(default_factory=dict)

    def summary(self) -> str:
        lines = [
            f"{SECTION_TITLE}: {self.model_description}",
            f"Task type:     {self.task_type}",
            f"Test samples:  {self.test_samples}",
        ]
        if self.unscored_samples:
            lines.append(f"Unscored:      {self.unscored_samples}")
        lines.append("Validation Set Metrics:")
        for line in sorted(f"Metric: [{name}, value: [{value:.6f}]" for name, value in self.metrics.items()):
            lines.append(f"  - {line}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "model_description": self.model_description,
            "task_type": self.task_type.value,
            "metrics": self.metrics,
            "test_samples": self.test_samples,
            "unscored_samples": self.unscored_samples,
            "notes": self.notes,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


def _sigmoid(x: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-x))


def evaluate_regression_simple(y_pred: np.ndarray, y_test: np.ndarray) -> Dict[str, float]:
    """Regression metrics without any model context.

    Args:
        y_pred: Predicted values.
        y_test: True target values.

    Returns:
        Dict with rmse, mae, r2, correlation.
    """
    rmse = float(np.sqrt(mean_squared_error(y_test, y_pred)))
    mae = float(mean_absolute_error(y_test, y_pred))
    r2 = float(r2_score(y_test, y_pred)) if len(y_test) > 1 else 0.0

    if np.std(y_test) > 0 and np.std(y_pred) > 0:
        correlation = float(np.corrcoef(y_test, y_pred)[0, 1])
    else:
        correlation = 0.0

    return {
        "rmse": rmse,
        "mae": mae,
        "r2": r2,
        "correlation": correlation,
    }


def evaluate_classification_simple(raw_scores: np.ndarray, y_test: np.ndarray) -> Dict[str, float]:
    """Binary classification metrics from raw (logit) scores.

    Args:
        raw_scores: Scores before the logistic link.
        y_test: True labels in {0, 1}.

    Returns:
        Dict with auc, logloss, accuracy. AUC is 0.0 when only one class is present.
    """
    y_test = np.asarray(y_test, dtype=np.float64)
    proba = np.clip(_sigmoid(raw_scores), 1e-15, 1 - 1e-15)

    if 0 < y_test.sum() < len(y_test):
        try:
            auc = float(roc_auc_score(y_test, raw_scores))
        except ValueError:
            auc = 0.0
    else:
        auc = 0.0

    return {
        "auc": auc,
        "logloss": float(log_loss(y_test, proba, labels=[0.0, 1.0])),
        "accuracy": float(accuracy_score(y_test, (raw_scores > 0).astype(np.float64))),
    }


def evaluate_scores(
    scores: KeyValueScore,
    dataset: GameDataset,
    task_type: TaskType,
    model_description: str = "GAME model",
) -> ModelDiagnosticReport:
    """Evaluate raw scores against the responses of a dataset.

    Examples of the dataset that have no score are counted as unscored and
    left out of the metrics.

    Args:
        scores: Raw scores keyed by unique id.
        dataset: Dataset carrying the responses.
        task_type: Task type the scores were produced for.
        model_description: Free text naming the evaluated model.

    Returns:
        ModelDiagnosticReport with all metrics.

    Raises:
        ValueError: If no example of the dataset was scored.
    """
    uids = dataset.uids
    responses = dataset.responses()
    raw = scores.scores.reindex(uids).to_numpy()
    scored = ~np.isnan(raw)
    if not scored.any():
        raise ValueError("None of the dataset's examples were scored")

    unscored = int((~scored).sum())
    if unscored:
        logger.warning("%d of %d examples have no score and are skipped", unscored, len(uids))
    raw = raw[scored]
    y = responses[scored]

    if task_type.is_classification:
        metrics = evaluate_classification_simple(raw, y)
    elif task_type is TaskType.POISSON_REGRESSION:
        metrics = evaluate_regression_simple(np.exp(raw), y)
    else:
        metrics = evaluate_regression_simple(raw, y)

    return ModelDiagnosticReport(
        model_description=model_description,
        task_type=task_type,
        metrics=metrics,
        test_samples=int(scored.sum()),
        unscored_samples=unscored,
    )
