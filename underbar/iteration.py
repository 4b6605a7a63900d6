"""
Traversal core shared by every collection operation.

A collection is either an ordered sequence (indices 0..n-1), a mapping
(keys in the mapping's own iteration order), or any object implementing
the ``Traversable`` capability. Every operation in the library goes
through ``traverse`` so callbacks always see ``(value, key, collection)``
regardless of shape.
"""

import functools
import inspect
import logging
from abc import ABC, abstractmethod
from collections import abc
from typing import Any, Callable, Iterator, Optional, Tuple

from underbar.exceptions import InvalidCollectionError

logger = logging.getLogger(__name__)


class Traversable(ABC):
    """Something that can produce ``(value, key)`` pairs in traversal order."""

    @abstractmethod
    def pairs(self) -> Iterator[Tuple[Any, Any]]:
        ...


class SequenceTraversal(Traversable):
    """Index-ordered traversal of a sequence."""

    def __init__(self, sequence: abc.Sequence):
        self._sequence = sequence

    def pairs(self):
        for index, value in enumerate(self._sequence):
            yield value, index

    def __len__(self):
        return len(self._sequence)


class MappingTraversal(Traversable):
    """Key-ordered traversal of a mapping (the mapping's own iteration order)."""

    def __init__(self, mapping: abc.Mapping):
        self._mapping = mapping

    def pairs(self):
        for key, value in self._mapping.items():
            yield value, key

    def __len__(self):
        return len(self._mapping)


@functools.singledispatch
def traverse(collection) -> Traversable:
    """Return the Traversable view of ``collection``.

    Raises InvalidCollectionError for anything that is not a sequence, a
    mapping or a Traversable. Sets, generators and other one-shot or
    unordered iterables are rejected on purpose: they have no stable keys.
    """
    raise InvalidCollectionError(
        f"Expected a sequence, mapping or Traversable, got {type(collection).__name__}"
    )


@traverse.register(Traversable)
def _traverse_traversable(collection):
    return collection


@traverse.register(abc.Mapping)
def _traverse_mapping(collection):
    return MappingTraversal(collection)


@traverse.register(abc.Sequence)
def _traverse_sequence(collection):
    return SequenceTraversal(collection)


def _positional_capacity(fn: Callable) -> Optional[int]:
    """Number of positional arguments ``fn`` accepts, None when unbounded.

    Plain functions and methods count every positional parameter. Anything
    else (builtins, classes, partials) counts only the required ones, so
    ``round`` or ``int`` never receive an index as their second argument.
    Returns 0 when the signature cannot be inspected.
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return 0

    plain = inspect.isfunction(fn) or inspect.ismethod(fn)
    count = 0
    for param in signature.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return None if plain else count
        if param.kind not in (inspect.Parameter.POSITIONAL_ONLY,
                              inspect.Parameter.POSITIONAL_OR_KEYWORD):
            continue
        if plain or param.default is inspect.Parameter.empty:
            count += 1
    return count


def bind_iterator(iterator: Callable, minimum: int = 1) -> Callable:
    """Adapt a callback so surplus positional arguments are dropped.

    ``map(items, lambda x: x * 2)`` and ``map(items, lambda v, k, c: ...)``
    both work: the returned callable forwards only as many of its arguments
    as ``iterator`` accepts, but never fewer than ``minimum``.
    """
    capacity = _positional_capacity(iterator)
    if capacity is None:
        return iterator

    capacity = max(capacity, minimum)

    def bound(*args):
        return iterator(*args[:capacity])

    return bound


def call_iterator(iterator: Callable, *args, minimum: int = 1):
    """One-off call of ``iterator`` with as many of ``args`` as it accepts."""
    return bind_iterator(iterator, minimum)(*args)


def identity(value):
    """Return ``value`` unchanged; the default iterator."""
    return value


def each(collection, iterator: Callable) -> None:
    """Call ``iterator(value, key, collection)`` for every element.

    Sequences are visited by ascending index, mappings in key order. The
    iterator must not mutate ``collection`` itself while it runs; doing so
    leaves the traversal undefined.
    """
    traversal = traverse(collection)
    call = bind_iterator(iterator)
    for value, key in traversal.pairs():
        call(value, key, collection)


def is_nested_sequence(value) -> bool:
    """True for sequences that flatten and friends descend into.

    Strings and bytes are sequences of themselves and are treated as leaves.
    """
    return isinstance(value, (list, tuple))
