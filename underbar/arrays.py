"""
Set-like and structural algorithms over arrays.

Results are always new lists; inputs are never modified. Equality between
elements is Python ``==`` except in ``uniq``, which tracks seen values as
dictionary keys (see its docstring for what that conflates).
"""

import random
from typing import Any, Callable, List, Optional, Sequence, Tuple

from underbar.iteration import bind_iterator, is_nested_sequence, traverse
from underbar.operations import contains, every, some
from underbar.types import ABSENT

_UNHASHABLE = object()


def _seen_key(value):
    try:
        hash(value)
    except TypeError:
        return (_UNHASHABLE, repr(value))
    return value


def uniq(array, is_sorted: bool = False, iterator: Optional[Callable] = None) -> List[Any]:
    """Duplicate-free copy of ``array`` keeping first occurrences in order.

    Elements are compared through ``iterator(value, index, array)`` only when
    ``is_sorted`` is true and an iterator is given; otherwise the raw values
    are compared. ``is_sorted`` is accepted as a hint and does not change the
    algorithm.

    Known limitation: seen values are dictionary keys, so values that hash
    and compare equal collapse together (``1``, ``1.0`` and ``True``), and
    unhashable values are compared by their ``repr``.
    """
    criterion = bind_iterator(iterator) if (is_sorted and iterator) else None
    seen = {}
    result = []
    for value, index in traverse(array).pairs():
        marker = _seen_key(criterion(value, index, array) if criterion else value)
        if marker not in seen:
            seen[marker] = value
            result.append(value)
    return result


def _flatten_into(sequence, result: List[Any]) -> None:
    for value, _ in traverse(sequence).pairs():
        if is_nested_sequence(value):
            _flatten_into(value, result)
        else:
            result.append(value)


def flatten(nested) -> List[Any]:
    """Flatten arbitrarily nested lists/tuples depth-first, left to right.

    >>> flatten([1, [2, [3, 4]], 5])
    [1, 2, 3, 4, 5]

    Cyclic nesting is not supported.
    """
    result = []
    _flatten_into(nested, result)
    return result


def unzip(arrays: Sequence[Sequence[Any]]) -> List[Tuple[Any, ...]]:
    """Group the i-th element of every array into the i-th tuple.

    The result is as long as the longest array; shorter arrays are padded
    with ABSENT.
    """
    columns = [[value for value, _ in traverse(array).pairs()]
               for array, _ in traverse(arrays).pairs()]
    if not columns:
        return []

    length = max(len(column) for column in columns)
    return [
        tuple(column[index] if index < len(column) else ABSENT for column in columns)
        for index in range(length)
    ]


def zip(*arrays) -> List[Tuple[Any, ...]]:
    """Variadic form of unzip.

    >>> zip(['a', 'b'], [1])
    [('a', 1), ('b', ABSENT)]
    """
    return unzip(arrays)


def intersection(*arrays) -> List[Any]:
    """Values of the first array present in every other array.

    Order follows the first array; repeated values appear once.
    """
    if not arrays:
        return []

    head, rest = arrays[0], arrays[1:]
    for other in rest:
        traverse(other)

    result = []
    for value, _ in traverse(head).pairs():
        if contains(result, value):
            continue
        if every(rest, lambda other: contains(other, value)):
            result.append(value)
    return result


def difference(array, *others) -> List[Any]:
    """Values of ``array`` found in none of ``others``; order and repeats kept."""
    for other in others:
        traverse(other)

    return [value for value, _ in traverse(array).pairs()
            if not some(others, lambda other: contains(other, value))]


def shuffle(array, rng: Optional[random.Random] = None) -> List[Any]:
    """Uniformly random permutation of ``array`` (Fisher-Yates).

    ``rng`` is anything with ``randint``; pass a seeded ``random.Random``
    for reproducible output.
    """
    if rng is None:
        rng = random
    shuffled = [value for value, _ in traverse(array).pairs()]
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
