from .evaluator import (
    evaluate_scores,
    evaluate_regression_simple,
    evaluate_classification_simple,
    ModelDiagnosticReport,
)

__all__ = [
    "evaluate_scores",
    "evaluate_regression_simple",
    "evaluate_classification_simple",
    "ModelDiagnosticReport",
]
