"""Merging helpers for mappings."""

from collections import abc

from underbar.iteration import traverse


def extend(destination: abc.MutableMapping, *sources) -> abc.MutableMapping:
    """Copy every key of each source onto ``destination``; later sources win.

    ``destination`` is modified in place and returned. Every source is
    checked first, so an invalid one leaves ``destination`` untouched.
    """
    traversals = [traverse(source) for source in sources]
    for traversal in traversals:
        for value, key in traversal.pairs():
            destination[key] = value
    return destination


def defaults(destination: abc.MutableMapping, *sources) -> abc.MutableMapping:
    """Like extend, but never overwrite a key ``destination`` already has."""
    traversals = [traverse(source) for source in sources]
    for traversal in traversals:
        for value, key in traversal.pairs():
            if key not in destination:
                destination[key] = value
    return destination
