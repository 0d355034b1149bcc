"""Tests for GameDatum / GameDataset construction."""
import numpy as np
import pandas as pd
import pytest

from gameml.data.game_datum import GameDataset, GameDatum


def _make_frame():
    return pd.DataFrame({
        "uid": [100, 200, 300],
        "f1": [1.0, 2.0, 3.0],
        "f2": [0.0, 0.5, -1.0],
        "userId": [7, 8, 7],
        "response": [1.0, 0.0, 1.0],
        "w": [1.0, 2.0, 3.0],
    })


class TestGameDataset:
    def test_from_frame(self):
        dataset = GameDataset.from_frame(
            _make_frame(),
            feature_shards={"global": ["f1", "f2"], "user": ["f1"]},
            id_tag_columns=["userId"],
            uid_column="uid",
            weight_column="w",
        )
        assert len(dataset) == 3
        np.testing.assert_array_equal(dataset.uids, [100, 200, 300])
        datum = dataset[200]
        np.testing.assert_array_equal(datum.features("global"), [2.0, 0.5])
        np.testing.assert_array_equal(datum.features("user"), [2.0])
        assert datum.id_tag("userId") == "8"
        assert datum.weight == 2.0
        assert datum.offset == 0.0
        np.testing.assert_array_equal(dataset.responses(), [1.0, 0.0, 1.0])

    def test_row_position_uids(self):
        dataset = GameDataset.from_frame(_make_frame(), feature_shards={"global": ["f1"]})
        np.testing.assert_array_equal(dataset.uids, [0, 1, 2])

    def test_missing_response_column(self):
        df = _make_frame().drop(columns=["response"])
        dataset = GameDataset.from_frame(df, feature_shards={"global": ["f1"]})
        np.testing.assert_array_equal(dataset.responses(), [0.0, 0.0, 0.0])

    def test_duplicate_uids(self):
        df = _make_frame()
        df["uid"] = [1, 1, 2]
        with pytest.raises(ValueError):
            GameDataset.from_frame(df, feature_shards={"global": ["f1"]}, uid_column="uid")

    def test_missing_column(self):
        with pytest.raises(KeyError):
            GameDataset.from_frame(_make_frame(), feature_shards={"global": ["nope"]})

    def test_feature_matrix_and_id_tags(self):
        dataset = GameDataset.from_frame(
            _make_frame(), feature_shards={"global": ["f1", "f2"]}, id_tag_columns=["userId"],
        )
        assert dataset.feature_matrix("global").shape == (3, 2)
        assert list(dataset.id_tag_values("userId")) == ["7", "8", "7"]

    def test_missing_shard_and_tag(self):
        datum = GameDatum(response=1.0, feature_shard_container={})
        with pytest.raises(KeyError):
            datum.features("global")
        with pytest.raises(KeyError):
            datum.id_tag("userId")

    def test_iteration(self):
        dataset = GameDataset({5: GameDatum(1.0, {"g": np.array([1.0])})})
        pairs = list(dataset)
        assert pairs[0][0] == 5
        assert isinstance(pairs[0][1], GameDatum)

    def test_empty(self):
        dataset = GameDataset({})
        assert len(dataset) == 0
        assert dataset.uids.dtype == np.int64
