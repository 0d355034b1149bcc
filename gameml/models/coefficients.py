"""
Coefficient vector of a generalized linear model.
"""
from typing import Optional

import numpy as np


class Coefficients:
    """Coefficient means with optional variances."""

    def __init__(self, means, variances=None):
        self.means = np.asarray(means, dtype=np.float64)
        self.variances: Optional[np.ndarray] = (
            None if variances is None else np.asarray(variances, dtype=np.float64)
        )
        if self.means.ndim != 1:
            raise ValueError(f"Coefficient means must be 1-D, got shape {self.means.shape}")
        if self.variances is not None and self.variances.shape != self.means.shape:
            raise ValueError(
                f"Variances shape {self.variances.shape} does not match means shape {self.means.shape}"
            )

    @property
    def dimension(self) -> int:
        return int(self.means.shape[0])

    def compute_score(self, features: np.ndarray) -> float:
        features = np.asarray(features, dtype=np.float64)
        if features.shape != self.means.shape:
            raise ValueError(
                f"Feature dimension {features.shape[0] if features.ndim else 0} "
                f"does not match coefficient dimension {self.dimension}"
            )
        return float(np.dot(features, self.means))

    def to_summary_string(self) -> str:
        lines = [
            f"Dimension: {self.dimension}",
            f"Non-zeros: {int(np.count_nonzero(self.means))}",
            f"L2 norm:   {float(np.linalg.norm(self.means)):.6f}",
        ]
        if self.dimension:
            lines.append(f"Min/Max:   {self.means.min():.6f} / {self.means.max():.6f}")
        if self.variances is not None:
            lines.append(f"Mean var:  {float(np.mean(self.variances)) if self.dimension else 0.0:.6f}")
        return "\n".join(lines)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Coefficients):
            return NotImplemented
        if not np.array_equal(self.means, other.means):
            return False
        if self.variances is None or other.variances is None:
            return self.variances is None and other.variances is None
        return bool(np.array_equal(self.variances, other.variances))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Coefficients(dimension={self.dimension})"
