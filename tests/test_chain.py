import pytest

from underbar import Chain, EmptyReductionError, chain


class TestChain:
    """Test recorded, re-evaluable operation chains"""

    def test_method_chaining(self):
        result = (
            chain(list(range(20)))
            .map(lambda x: x * 2)
            .filter(lambda x: x > 10)
            .reject(lambda x: x % 4 == 0)
            .value()
        )
        expected = [14, 18, 22, 26, 30, 34, 38]
        assert result == expected, f"Expected {expected}, got {result}"

    def test_steps_are_deferred(self):
        calls = []
        pipeline = chain([1, 2, 3]).map(lambda x: calls.append(x) or x)
        assert calls == [], "Nothing should run before value()"

        pipeline.value()
        assert calls == [1, 2, 3]

    def test_repeatable_and_immutable(self):
        base = chain([3, 1, 2, 3])
        deduped = base.uniq()
        sorted_chain = deduped.sort_by()

        assert base.value() == [3, 1, 2, 3]
        assert deduped.value() == [3, 1, 2]
        assert sorted_chain.value() == [1, 2, 3]
        assert sorted_chain.value() == [1, 2, 3]

    def test_array_steps(self):
        result = (
            chain([1, [2, [3, [4]]], 2])
            .flatten()
            .uniq()
            .difference([4])
            .intersection([1, 2, 3, 9])
            .value()
        )
        assert result == [1, 2, 3]

    def test_pluck_and_sort_by(self):
        people = [{"name": "moe", "age": 40}, {"name": "larry", "age": 50}, {"name": "curly", "age": 60}]
        result = chain(people).sort_by(lambda p: -p["age"]).pluck("name").value()
        assert result == ["curly", "larry", "moe"]

    def test_shuffle_step(self, rng):
        result = chain([1, 2, 3, 4]).shuffle(rng).value()
        assert sorted(result) == [1, 2, 3, 4]

    def test_terminal_operations(self):
        numbers = chain([1, 2, 3, 4]).map(lambda x: x * x)

        assert numbers.reduce(lambda total, n: total + n) == 30
        assert numbers.reduce(lambda total, n: total + n, 100) == 130
        assert numbers.every(lambda n: n > 0) is True
        assert numbers.some(lambda n: n > 10) is True
        assert numbers.contains(9) is True
        assert numbers.first() == 1
        assert numbers.last(2) == [9, 16]
        assert numbers.size() == 4

    def test_mapping_source(self):
        values = chain({"a": 1, "b": 2})
        assert values.to_list() == [1, 2]
        assert values.map(lambda value, key: key).value() == ["a", "b"]

    def test_empty_reduce_raises(self):
        with pytest.raises(EmptyReductionError):
            chain([]).reduce(lambda a, b: a + b)

    def test_unknown_op(self):
        with pytest.raises(ValueError):
            Chain([1], [("explode", ())]).value()
