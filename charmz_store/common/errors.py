class StoreError(Exception):
    """Base class for catalog and transient store failures."""


class NotFoundError(StoreError, LookupError):
    """The addressed entity id does not exist in the target collection."""


class ValidationError(StoreError, ValueError):
    """An entity shape invariant was violated."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])


class PersistenceError(StoreError):
    """The backing file could not be read or written."""
