import pytest
from enumerable import Enumerable
from iterable import Iterable


class TestEnumerable:
    """Test index-aware operations over a backing list"""

    def test_default_is_empty(self):
        data = Enumerable()
        assert data.count() == 0
        assert data.data() == []
        assert len(data) == 0

    def test_data_exposes_backing_list(self):
        backing = [1, 2]
        data = Enumerable(backing)
        assert data.data() is backing

    def test_external_mutation_is_visible(self):
        """Mutating the shared backing list is reflected on the next read"""
        backing = [1, 2]
        data = Enumerable(backing)
        backing.append(3)
        data.data().insert(0, 0)
        assert data.count() == 4
        assert data.to_array() == [0, 1, 2, 3]
        assert data.where(lambda x: x > 1).to_array() == [2, 3]

    def test_set_data_replaces_contents(self):
        data = Enumerable([1, 2, 3])
        replacement = ["a"]
        data.set_data(replacement)
        assert data.data() is replacement
        assert data.to_array() == ["a"]

    def test_first_index_and_last_index(self):
        data = Enumerable([5, 8, 5, 3, 8])
        assert data.first_index(lambda x: x == 8) == 1
        assert data.last_index(lambda x: x == 8) == 4
        assert data.first_index(lambda x: x == 5) == 0
        assert data.last_index(lambda x: x == 5) == 2

    def test_index_not_found_sentinel(self):
        data = Enumerable([1, 2, 3])
        assert data.first_index(lambda x: x > 10) == -1
        assert data.last_index(lambda x: x > 10) == -1
        assert Enumerable().first_index(lambda x: True) == -1

    def test_remove_every_equal_element(self):
        data = Enumerable([1, 2, 2, 3])
        data.remove(2)
        assert data.to_array() == [1, 3]

    def test_remove_preserves_order_and_list_identity(self):
        backing = [4, 1, 4, 2, 4, 3]
        data = Enumerable(backing)
        data.remove(4)
        assert backing == [1, 2, 3]
        assert data.data() is backing

    def test_remove_with_equality(self):
        notes = Enumerable([60, 62, 72, 64, 84])
        notes.remove(0, lambda note, pitch_class: note % 12 == pitch_class)
        assert notes.to_array() == [62, 64]

    def test_remove_missing_item_is_noop(self):
        data = Enumerable([1, 2])
        data.remove(9)
        assert data.to_array() == [1, 2]

    def test_remove_default_equality_keeps_bools(self):
        data = Enumerable([1, True, 1.0, "1"])
        data.remove(1)
        assert data.to_array() == [True, "1"]

    def test_last_scans_backwards(self):
        data = Enumerable([1, 2, 3, 4])
        assert data.last() == 4
        assert data.last(lambda x: x % 2 == 1) == 3
        assert data.last(lambda x: x > 9) is None
        assert Enumerable().last(default=0) == 0

    def test_count_is_length(self):
        assert Enumerable([None, None]).count() == 2

    def test_range_materializes(self):
        data = Enumerable.range(0, 2, stop=9)
        assert isinstance(data, Enumerable)
        assert data.data() == [0, 2, 4, 6, 8]
        assert Enumerable.range(stop=3).to_array() == [0, 1, 2]
        assert Enumerable.range(5, -1, stop=2).to_array() == [5, 4, 3]

    def test_range_short_forms(self):
        assert Enumerable.range(5).to_array() == [0, 1, 2, 3, 4]
        assert Enumerable.range(2, 5).to_array() == [2, 3, 4]
        assert Enumerable.range(0, 2, 9).to_array() == [0, 2, 4, 6, 8]

    def test_range_requires_stop(self):
        with pytest.raises(ValueError):
            Enumerable.range()
        with pytest.raises(ValueError):
            Enumerable.range(step=2)

    def test_lazy_operations_return_plain_iterables(self):
        result = Enumerable([1, 2, 3]).take(2)
        assert type(result) is Iterable
        assert result.is_pipeline()

    def test_duplicates_allowed(self):
        assert Enumerable([1, 1, 1]).select(lambda x: x + 1).to_array() == [2, 2, 2]
