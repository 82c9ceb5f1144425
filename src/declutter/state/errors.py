"""State management errors."""


class StateError(Exception):
    """Base exception for state repository operations."""


class MissingStateError(StateError):
    """Raised when no state has been stored yet."""


class PersistenceError(StateError):
    """Raised when stored state cannot be read or written."""
