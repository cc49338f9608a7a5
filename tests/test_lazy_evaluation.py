import pytest
import time
from iterable import Iterable
from enumerable import Enumerable


class TestLazyEvaluation:
    """Test core lazy evaluation functionality"""

    def test_deferred_execution(self, tracker):
        """Test that select does not run until elements are pulled"""
        pipeline = Iterable.range(0, 1, 10).select(tracker)
        assert tracker.calls == 0, "Operations should not execute during definition"

        result = pipeline.take(3).to_array()
        # select has no lookahead, so exactly three elements are mapped
        assert tracker.calls == 3, f"Expected 3 calls, got {tracker.calls}"
        assert result == [0, 1, 2], f"Unexpected result: {result}"

    def test_where_pulls_one_ahead(self, tracker):
        """where buffers the next match when built and after every vended element"""
        pipeline = Iterable.range().select(tracker).where(lambda x: x % 2 == 0)
        assert tracker.seen == [0], "First match is buffered on construction"

        it = pipeline.iterator()
        assert it.next() == 0
        assert tracker.seen == [0, 1, 2]

    def test_infinite_sources_construct_immediately(self):
        """Building lazy stages over unbounded sources returns at once"""
        start = time.perf_counter()
        pipeline = (
            Iterable.range()
            .where(lambda x: x % 3 == 0)
            .select(lambda x: x * x)
            .take(4)
        )
        repeated = Iterable.repeat(7).select(lambda x: x + 1).take(3)
        assert time.perf_counter() - start < 1.0

        assert pipeline.to_array() == [0, 9, 36, 81]
        assert repeated.to_array() == [8, 8, 8]

    def test_range_defaults_and_direction(self):
        assert Iterable.range().take(3).to_array() == [0, 1, 2]
        assert Iterable.range(0, 3, 10).to_array() == [0, 3, 6, 9]
        assert Iterable.range(10, -3, 0).to_array() == [10, 7, 4, 1]
        assert Iterable.range(0, 0.5, 2).to_array() == [0, 0.5, 1.0, 1.5]

    @pytest.mark.parametrize("args,kwargs,expected", [
        ((5,), {}, [0, 1, 2, 3, 4]),
        ((2, 5), {}, [2, 3, 4]),
        ((2, 3, 11), {}, [2, 5, 8]),
        ((), {"stop": 3}, [0, 1, 2]),
        ((2,), {"stop": 5}, [2, 3, 4]),
    ])
    def test_range_argument_forms(self, args, kwargs, expected):
        assert Iterable.range(*args, **kwargs).to_array() == expected

    def test_range_with_only_step_is_unbounded(self):
        assert Iterable.range(step=2).take(4).to_array() == [0, 2, 4, 6]

    def test_progression_binds_by_name(self):
        assert Iterable.progression(5).take(3).to_array() == [5, 6, 7]
        assert Iterable.progression(2, 5).take(3).to_array() == [2, 7, 12]
        with pytest.raises(ValueError):
            Iterable.progression(1, 0)

    def test_range_empty_when_start_past_stop(self):
        assert Iterable.range(5, 1, 5).empty()
        assert Iterable.range(5, 1, 0).to_array() == []
        assert Iterable.range(0, -1, 3).to_array() == []

    def test_range_rejects_zero_step(self):
        with pytest.raises(ValueError):
            Iterable.range(0, 0, 10)

    def test_repeat_default_value(self):
        assert Iterable.repeat().take(2).to_array() == [0, 0]

    def test_root_iterable_can_be_consumed_repeatedly(self):
        """Root iterables hand out a fresh cursor per consumer"""
        source = Iterable.range(0, 1, 5)
        assert source.to_array() == [0, 1, 2, 3, 4]
        assert source.to_array() == [0, 1, 2, 3, 4]
        assert source.count() == 5

    def test_root_iterable_supports_several_pipelines(self):
        numbers = Enumerable([1, 2, 3, 4, 5, 6])
        evens = numbers.where(lambda x: x % 2 == 0)
        odds = numbers.where(lambda x: x % 2 == 1)
        assert odds.to_array() == [1, 3, 5]
        assert evens.to_array() == [2, 4, 6]

    def test_skip_runs_at_construction(self, tracker):
        """skip and skip_while discard their prefix eagerly"""
        Iterable.range(0, 1, 100).select(tracker).skip(4)
        assert tracker.calls == 4

        tracker.seen.clear()
        Iterable.range(0, 1, 100).select(tracker).skip_while(lambda x: x < 3)
        # 0, 1, 2 dropped and 3 held as the first survivor
        assert tracker.seen == [0, 1, 2, 3]

    def test_skip_while_predicate_not_reevaluated(self):
        """Only the leading run is dropped; later matches pass through"""
        result = Enumerable([1, 2, 5, 1, 2]).skip_while(lambda x: x < 3).to_array()
        assert result == [5, 1, 2]

    def test_take_zero_pulls_nothing(self, tracker):
        pipeline = Iterable.range().select(tracker).take(0)
        assert pipeline.empty()
        assert pipeline.to_array() == []
        assert tracker.calls == 0

    def test_take_negative_is_empty(self):
        assert Enumerable([1, 2, 3]).take(-2).to_array() == []

    def test_for_loop_bridge(self):
        """Iterables work with Python's iteration protocol"""
        squares = [x for x in Iterable.range(1, 1, 4).select(lambda x: x * x)]
        assert squares == [1, 4, 9]

    def test_from_iterable(self):
        source = Iterable.from_iterable([3, 1, 2])
        assert source.to_array() == [3, 1, 2]
        assert source.to_array() == [3, 1, 2], "Lists are re-iterable"

        generated = Iterable.from_iterable(x * 10 for x in range(3))
        assert generated.is_pipeline(), "Generators can only be consumed once"
        assert generated.to_array() == [0, 10, 20]
