"""
Higher-order operations over collections.

Every function accepts a sequence, a mapping or a Traversable and walks it
through ``traverse``, so results follow the same traversal order as
``each``. Callbacks get ``(value, key, collection)`` trimmed to what their
signature accepts.
"""

import logging
from collections import abc
from typing import Any, Callable, List, Optional

from underbar.exceptions import EmptyReductionError
from underbar.iteration import bind_iterator, identity, traverse
from underbar.types import NOT_FOUND, _MISSING

logger = logging.getLogger(__name__)


def map(collection, iterator: Callable) -> List[Any]:
    """Return a new list holding ``iterator(value, key, collection)`` per element."""
    call = bind_iterator(iterator)
    return [call(value, key, collection) for value, key in traverse(collection).pairs()]


def filter(collection, predicate: Optional[Callable] = None) -> List[Any]:
    """Values whose predicate result is truthy, in traversal order."""
    test = bind_iterator(predicate or identity)
    return [value for value, key in traverse(collection).pairs()
            if test(value, key, collection)]


def reject(collection, predicate: Optional[Callable] = None) -> List[Any]:
    """Values whose predicate result is falsy; the complement of filter."""
    test = bind_iterator(predicate or identity)
    return filter(collection, lambda value, key, coll: not test(value, key, coll))


def reduce(collection, iterator: Callable, accumulator=_MISSING):
    """Fold ``collection`` left to right with ``iterator(accumulator, value, key, collection)``.

    Without a starting ``accumulator`` the first value seeds the fold and is
    never passed to ``iterator``. ``None`` is a real starting value.

    Raises
    ------
    EmptyReductionError
        The collection is empty and no starting value was given.
    """
    pairs = traverse(collection).pairs()
    call = bind_iterator(iterator, minimum=2)

    if accumulator is _MISSING:
        try:
            accumulator, _ = next(pairs)
        except StopIteration:
            raise EmptyReductionError(
                "reduce() of empty collection with no initial value"
            ) from None

    for value, key in pairs:
        accumulator = call(accumulator, value, key, collection)
    return accumulator


def every(collection, predicate: Optional[Callable] = None) -> bool:
    """True when every element passes; stops at the first failure. Empty is True."""
    test = bind_iterator(predicate or identity)
    for value, key in traverse(collection).pairs():
        if not test(value, key, collection):
            return False
    return True


def some(collection, predicate: Optional[Callable] = None) -> bool:
    """True when at least one element passes. Empty is False.

    Written as ``not every(collection, not predicate)`` so the two stay duals.
    """
    test = bind_iterator(predicate or identity)
    return not every(collection, lambda value, key, coll: not test(value, key, coll))


def contains(collection, target) -> bool:
    """True when some value (not key, for mappings) equals ``target``."""
    for value, _ in traverse(collection).pairs():
        if value == target:
            return True
    return False


def index_of(array, target):
    """Smallest index whose value equals ``target``, or NOT_FOUND (-1)."""
    for value, key in traverse(array).pairs():
        if value == target:
            return key
    return NOT_FOUND


def first(array, n: Optional[int] = None):
    """First element, or a list of the first ``n``. None for an empty array."""
    if n is None:
        return array[0] if len(array) else None
    return list(array[:n])


def last(array, n: Optional[int] = None):
    """Last element, or a list of the last ``n`` (all of them when ``n`` is larger)."""
    if n is None:
        return array[-1] if len(array) else None
    if n <= 0:
        return []
    return list(array[-n:])


def _property(item, name):
    if isinstance(item, abc.Mapping):
        return item.get(name)
    if isinstance(name, str):
        return getattr(item, name, None)
    return item[name]


def pluck(collection, key) -> List[Any]:
    """Pull ``key`` out of every element; mapping keys first, then attributes."""
    return map(collection, lambda item: _property(item, key))


def invoke(collection, function_or_name, *args) -> List[Any]:
    """Call a function on each value, or the method named ``function_or_name``.

    >>> invoke(['a', 'b'], 'upper')
    ['A', 'B']
    """
    if callable(function_or_name):
        return map(collection, lambda value: function_or_name(value, *args))
    return map(collection, lambda value: getattr(value, function_or_name)(*args))


def sort_by(collection, iterator=None) -> List[Any]:
    """Values sorted ascending by ``iterator`` result (or by a named key/attribute).

    The sort is stable. Elements whose criterion is None sort last.
    """
    if iterator is None:
        criterion = bind_iterator(identity)
    elif isinstance(iterator, str):
        criterion = bind_iterator(lambda item: _property(item, iterator))
    else:
        criterion = bind_iterator(iterator)

    ranked, unranked = [], []
    for value, key in traverse(collection).pairs():
        rank = criterion(value, key, collection)
        if rank is None:
            unranked.append(value)
        else:
            ranked.append((rank, value))
    ranked.sort(key=lambda entry: entry[0])
    return [value for _, value in ranked] + unranked
