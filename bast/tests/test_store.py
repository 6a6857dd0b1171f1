import pytest

from bast.errors import FrozenStoreError
from bast.store import OrderedMap


class TestOrderedMap:
    """Test the insertion ordered store"""

    def test_keeps_insertion_order(self):
        m = OrderedMap()
        for key in ["c", "a", "b"]:
            m.put(key, key.upper())
        assert m.keys() == ["c", "a", "b"]
        assert m.values() == ["C", "A", "B"]
        assert list(m) == ["c", "a", "b"]
        assert m.first() == "C"

    def test_put_does_not_replace(self):
        m = OrderedMap()
        assert m.put("x", 1) is True
        assert m.put("x", 2) is False
        assert m["x"] == 1
        assert len(m) == 1

    def test_get_and_contains(self):
        m = OrderedMap()
        m.put("x", 1)
        assert "x" in m
        assert "y" not in m
        assert m.get("y") is None
        assert m.get("y", 5) == 5
        with pytest.raises(KeyError):
            m["y"]

    def test_empty(self):
        m = OrderedMap()
        assert not m
        assert m.first() is None
        assert m.items() == []

    def test_frozen_map_rejects_writes(self):
        m = OrderedMap()
        m.put("x", 1)
        m.freeze()
        assert m.frozen
        with pytest.raises(FrozenStoreError):
            m.put("y", 2)
        assert m.keys() == ["x"]

    def test_returned_lists_are_copies(self):
        m = OrderedMap()
        m.put("x", 1)
        m.values().append(2)
        m.keys().clear()
        assert m.values() == [1]
