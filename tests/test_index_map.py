"""Tests for feature index maps."""
import pytest

from gameml.util.index_map import INTERCEPT_KEY, DefaultIndexMap, IdentityIndexMap, IndexMap


class TestIdentityIndexMap:
    def test_with_intercept(self):
        index_map = IdentityIndexMap(4)
        assert index_map.get_feature_name(0) == "0"
        assert index_map.get_feature_name(2) == "2"
        assert index_map.get_feature_name(3) == INTERCEPT_KEY
        assert index_map.get_index(INTERCEPT_KEY) == 3
        assert index_map.get_index("1") == 1

    def test_without_intercept(self):
        index_map = IdentityIndexMap(4, use_intercept=False)
        assert index_map.get_feature_name(3) == "3"
        assert index_map.get_index(INTERCEPT_KEY) == IndexMap.NULL_KEY
        assert index_map.get_index("3") == 3

    def test_out_of_range(self):
        index_map = IdentityIndexMap(4)
        assert index_map.get_feature_name(4) is None
        assert index_map.get_feature_name(-1) is None
        assert index_map.get_index("4") == IndexMap.NULL_KEY
        assert index_map.get_index("-1") == IndexMap.NULL_KEY
        assert index_map.get_index("not_a_number") == IndexMap.NULL_KEY

    def test_mapping_protocol(self):
        index_map = IdentityIndexMap(3)
        assert len(index_map) == 3
        assert list(index_map) == ["0", "1", INTERCEPT_KEY]
        assert dict(index_map.items()) == {"0": 0, "1": 1, INTERCEPT_KEY: 2}
        assert index_map.get("7") is None
        assert "1" in index_map
        with pytest.raises(KeyError):
            index_map["7"]

    def test_read_only(self):
        index_map = IdentityIndexMap(3)
        with pytest.raises(TypeError):
            index_map["x"] = 5
        with pytest.raises(TypeError):
            del index_map["0"]

    def test_negative_dimension(self):
        with pytest.raises(ValueError):
            IdentityIndexMap(-1)


class TestDefaultIndexMap:
    def test_lookup(self):
        index_map = DefaultIndexMap(["age", "clicks"], add_intercept=True)
        assert index_map["age"] == 0
        assert index_map.get_index(INTERCEPT_KEY) == 2
        assert index_map.get_feature_name(1) == "clicks"
        assert index_map.get_feature_name(5) is None
        assert index_map.get_index("missing") == IndexMap.NULL_KEY
        assert len(index_map) == 3

    def test_duplicate_names(self):
        with pytest.raises(ValueError):
            DefaultIndexMap(["a", "a"])
