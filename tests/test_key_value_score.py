"""Tests for KeyValueScore merging."""
import numpy as np
import pandas as pd
import pytest

from gameml.data.key_value_score import KeyValueScore


class TestKeyValueScore:
    def test_from_dict(self):
        score = KeyValueScore.from_dict({1: 0.5, 2: -1.0})
        assert len(score) == 2
        assert score.get(1) == 0.5
        assert score.get(3) is None
        assert 2 in score

    def test_add_same_keys(self):
        left = KeyValueScore.from_dict({1: 0.5, 2: -0.2})
        right = KeyValueScore.from_dict({1: 0.1, 2: 0.0})
        total = (left + right).to_dict()
        assert total[1] == pytest.approx(0.6)
        assert total[2] == pytest.approx(-0.2)

    def test_add_outer_join(self):
        """Ids present on one side only keep their value."""
        left = KeyValueScore.from_dict({1: 1.0, 2: 2.0})
        right = KeyValueScore.from_dict({2: 3.0, 3: 4.0})
        assert (left + right).to_dict() == {1: 1.0, 2: 5.0, 3: 4.0}

    def test_add_empty_is_identity(self):
        score = KeyValueScore.from_dict({1: 1.5, 7: -2.0})
        assert score + KeyValueScore.empty() == score
        assert KeyValueScore.empty() + score == score

    def test_add_commutative_and_associative(self):
        a = KeyValueScore.from_dict({1: 0.1, 2: 0.2})
        b = KeyValueScore.from_dict({2: 0.3, 3: 0.4})
        c = KeyValueScore.from_dict({1: 0.5, 3: 0.6, 4: 0.7})
        assert (a + b).approx_equals(b + a)
        assert ((a + b) + c).approx_equals(a + (b + c), atol=1e-12)

    def test_sub(self):
        left = KeyValueScore.from_dict({1: 1.0, 2: 2.0})
        right = KeyValueScore.from_dict({2: 0.5, 3: 1.0})
        assert (left - right).to_dict() == {1: 1.0, 2: 1.5, 3: -1.0}

    def test_add_non_score_unsupported(self):
        with pytest.raises(TypeError):
            KeyValueScore.empty() + 1.0

    def test_mismatched_arrays(self):
        with pytest.raises(ValueError):
            KeyValueScore.from_arrays([1, 2], [0.5])

    def test_approx_equals_tolerance(self):
        left = KeyValueScore.from_dict({1: 0.3})
        right = KeyValueScore.from_dict({1: 0.1 + 0.2})
        assert left.approx_equals(right)
        assert not left.approx_equals(KeyValueScore.from_dict({1: 0.31}))
        assert not left.approx_equals(KeyValueScore.from_dict({2: 0.3}))

    def test_scores_series(self):
        score = KeyValueScore(pd.Series([1.0, 2.0], index=[10, 20]))
        series = score.scores
        assert series.index.name == "uid"
        assert series.dtype == np.float64
        assert series.index.dtype == np.int64

    def test_scores_is_a_copy(self):
        score = KeyValueScore.from_dict({1: 1.0})
        series = score.scores
        series.loc[1] = 99.0
        assert score.get(1) == 1.0
