"""
Error taxonomy for the board core.

None of these are fatal: validation errors go back to the caller,
reference errors become no-ops, storage and deserialization errors
degrade to in-memory operation or a freshly seeded board.
"""


class BoardError(Exception):
    """Base class for all board core errors."""
    pass


class ValidationError(BoardError):
    """Raised when a new task is missing content or priority."""
    pass


class BoardReferenceError(BoardError, LookupError):
    """Raised when a task or column id is not on the current board."""
    pass


class StorageError(BoardError):
    """Raised when the key-value store cannot be read or written."""
    pass


class DeserializationError(BoardError):
    """Raised when a persisted snapshot is malformed or breaks an invariant."""
    pass


class ConfigError(BoardError):
    """Raised when configuration is invalid or incomplete."""
    pass
