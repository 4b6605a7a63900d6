"""Error types raised by underbar."""


class UnderbarError(Exception):
    """Base class for every error raised by the library."""
    pass


class InvalidCollectionError(UnderbarError, TypeError):
    """Raised when a value is neither a sequence, a mapping nor a Traversable."""
    pass


class EmptyReductionError(UnderbarError, TypeError):
    """Raised when reducing an empty collection without a starting value."""
    pass


class SchedulingError(UnderbarError, ValueError):
    """Raised when a deferred call cannot be scheduled."""
    pass
