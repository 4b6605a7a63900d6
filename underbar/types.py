"""Sentinel values shared across the library."""


class _Absent:
    """Marks a slot with no element, e.g. the tail of a short input to zip."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()

# Returned by index_of when nothing matches
NOT_FOUND = -1

# Default for optional arguments where None is a legitimate value
_MISSING = object()


__all__ = ["ABSENT", "NOT_FOUND"]
