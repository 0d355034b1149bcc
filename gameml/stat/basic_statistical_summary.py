"""
Per-feature summary statistics.

Statistics are accumulated batch by batch; partial summaries of disjoint
batches merge associatively, so a summary can be built from data that never
sits in memory at once.
"""
import json
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class BasicStatisticalSummary:
    """Column statistics of a feature matrix."""
    count: int
    mean: np.ndarray
    variance: np.ndarray  # sample variance (n - 1 denominator)
    num_nonzeros: np.ndarray
    max: np.ndarray
    min: np.ndarray
    norm_l1: np.ndarray
    norm_l2: np.ndarray
    mean_abs: np.ndarray

    @classmethod
    def from_matrix(cls, features: np.ndarray) -> "BasicStatisticalSummary":
        return _Accumulator.from_batch(np.asarray(features, dtype=np.float64)).result()

    @classmethod
    def from_batches(cls, batches: Iterable[np.ndarray]) -> "BasicStatisticalSummary":
        """Summarize the row-wise concatenation of several batches.

        Raises:
            ValueError: If no batch is given or batches differ in width.
        """
        acc: Optional[_Accumulator] = None
        for batch in batches:
            part = _Accumulator.from_batch(np.asarray(batch, dtype=np.float64))
            acc = part if acc is None else acc.merge(part)
        if acc is None:
            raise ValueError("Cannot summarize an empty sequence of batches")
        return acc.result()

    @classmethod
    def from_frame(cls, df: pd.DataFrame, columns: Optional[List[str]] = None) -> "BasicStatisticalSummary":
        columns = list(columns) if columns else list(df.columns)
        return cls.from_matrix(df[columns].to_numpy(dtype=np.float64))

    @property
    def dimension(self) -> int:
        return int(self.mean.shape[0])

    def to_frame(self, feature_names: Optional[List[str]] = None) -> pd.DataFrame:
        index = feature_names if feature_names is not None else list(range(self.dimension))
        return pd.DataFrame(
            {
                "mean": self.mean,
                "variance": self.variance,
                "num_nonzeros": self.num_nonzeros,
                "max": self.max,
                "min": self.min,
                "norm_l1": self.norm_l1,
                "norm_l2": self.norm_l2,
                "mean_abs": self.mean_abs,
            },
            index=pd.Index(index, name="feature"),
        )

    def to_dict(self, feature_names: Optional[List[str]] = None) -> Dict:
        frame = self.to_frame(feature_names)
        return {
            "count": self.count,
            "features": {str(name): {k: float(v) for k, v in row.items()} for name, row in frame.iterrows()},
        }

    def to_json(self, feature_names: Optional[List[str]] = None) -> str:
        return json.dumps(self.to_dict(feature_names), indent=2)


class _Accumulator:
    """Mergeable partial statistics (Chan et al. pairwise update for the variance)."""

    def __init__(self, count, mean, m2, nnz, max_, min_, l1, sq):
        self.count = count
        self.mean = mean
        self.m2 = m2
        self.nnz = nnz
        self.max = max_
        self.min = min_
        self.l1 = l1
        self.sq = sq

    @classmethod
    def from_batch(cls, batch: np.ndarray) -> "_Accumulator":
        if batch.ndim != 2:
            raise ValueError(f"Expected a 2-D feature matrix, got shape {batch.shape}")
        n, d = batch.shape
        if n == 0:
            return cls(0, np.zeros(d), np.zeros(d), np.zeros(d),
                       np.full(d, -np.inf), np.full(d, np.inf), np.zeros(d), np.zeros(d))
        mean = batch.mean(axis=0)
        return cls(
            n,
            mean,
            ((batch - mean) ** 2).sum(axis=0),
            np.count_nonzero(batch, axis=0).astype(np.float64),
            batch.max(axis=0),
            batch.min(axis=0),
            np.abs(batch).sum(axis=0),
            (batch ** 2).sum(axis=0),
        )

    def merge(self, other: "_Accumulator") -> "_Accumulator":
        if self.mean.shape != other.mean.shape:
            raise ValueError(
                f"Cannot merge summaries of {self.mean.shape[0]} and {other.mean.shape[0]} features"
            )
        n = self.count + other.count
        if n == 0:
            return self
        delta = other.mean - self.mean
        mean = self.mean + delta * (other.count / n)
        m2 = self.m2 + other.m2 + delta ** 2 * (self.count * other.count / n)
        return _Accumulator(
            n, mean, m2,
            self.nnz + other.nnz,
            np.maximum(self.max, other.max),
            np.minimum(self.min, other.min),
            self.l1 + other.l1,
            self.sq + other.sq,
        )

    def result(self) -> BasicStatisticalSummary:
        n = self.count
        if n == 0:
            logger.warning("Summarizing an empty feature matrix")
        variance = self.m2 / (n - 1) if n > 1 else np.zeros_like(self.m2)
        return BasicStatisticalSummary(
            count=n,
            mean=self.mean,
            variance=variance,
            num_nonzeros=self.nnz,
            max=self.max,
            min=self.min,
            norm_l1=self.l1,
            norm_l2=np.sqrt(self.sq),
            mean_abs=self.l1 / n if n else np.zeros_like(self.l1),
        )
