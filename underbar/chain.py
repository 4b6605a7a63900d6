"""Chainable wrapper over the collection operations."""

import logging

from underbar import arrays, operations
from underbar.iteration import identity

logger = logging.getLogger(__name__)


class Chain:
    """
    A chain of collection operations. Steps are recorded and applied only
    when ``value()`` (or a terminal method) is called, so one chain can be
    evaluated repeatedly and extended without touching the original.
    """
    def __init__(self, source, ops=None):
        self._source = source
        self._ops = ops or []          # sequence of ("op_name", args)

    # --------- chainable steps (recorded) ----------
    def map(self, iterator):
        return self._with_op(("map", (iterator,)))

    def filter(self, predicate=None):
        return self._with_op(("filter", (predicate,)))

    def reject(self, predicate=None):
        return self._with_op(("reject", (predicate,)))

    def pluck(self, key):
        return self._with_op(("pluck", (key,)))

    def sort_by(self, iterator=None):
        return self._with_op(("sort_by", (iterator,)))

    def uniq(self, is_sorted=False, iterator=None):
        return self._with_op(("uniq", (is_sorted, iterator)))

    def flatten(self):
        return self._with_op(("flatten", ()))

    def shuffle(self, rng=None):
        return self._with_op(("shuffle", (rng,)))

    def difference(self, *others):
        return self._with_op(("difference", others))

    def intersection(self, *others):
        return self._with_op(("intersection", others))

    # --------- forcing evaluation ----------
    def value(self):
        """Apply every recorded step to the source and return the result."""
        result = self._source
        for op, args in self._ops:
            if op == "map":
                result = operations.map(result, *args)
            elif op == "filter":
                result = operations.filter(result, *args)
            elif op == "reject":
                result = operations.reject(result, *args)
            elif op == "pluck":
                result = operations.pluck(result, *args)
            elif op == "sort_by":
                result = operations.sort_by(result, *args)
            elif op == "uniq":
                result = arrays.uniq(result, *args)
            elif op == "flatten":
                result = arrays.flatten(result)
            elif op == "shuffle":
                result = arrays.shuffle(result, *args)
            elif op == "difference":
                result = arrays.difference(result, *args)
            elif op == "intersection":
                result = arrays.intersection(result, *args)
            else:
                raise ValueError(f"Unknown op: {op}")
        logger.debug(f"Evaluated chain of {len(self._ops)} steps")
        return result

    def to_list(self):
        return operations.map(self.value(), identity)

    # --------- terminal operations ----------
    def reduce(self, iterator, *accumulator):
        return operations.reduce(self.value(), iterator, *accumulator)

    def every(self, predicate=None):
        return operations.every(self.value(), predicate)

    def some(self, predicate=None):
        return operations.some(self.value(), predicate)

    def contains(self, target):
        return operations.contains(self.value(), target)

    def first(self, n=None):
        return operations.first(self.to_list(), n)

    def last(self, n=None):
        return operations.last(self.to_list(), n)

    def size(self):
        return len(self.to_list())

    # --------- helpers ----------
    def _with_op(self, op_tuple):
        return Chain(self._source, self._ops + [op_tuple])


def chain(collection) -> Chain:
    """Start a chain over ``collection``.

    >>> chain([3, 1, 2, 3]).uniq().sort_by().map(lambda x: x * 10).value()
    [10, 20, 30]
    """
    return Chain(collection)
