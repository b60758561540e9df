"""Exceptions raised by the storage layer."""


class NotenbuchError(Exception):
    """Base class for notenbuch errors."""

    pass


class ValidationError(NotenbuchError):
    """Input is missing or invalid; raised before anything is written.

    The message is meant to be shown to the user as is.
    """

    pass


class StoreUnavailableError(NotenbuchError):
    """The key-value store could not complete a get, set or remove."""

    def __init__(self, operation: str, path: str, cause: BaseException | None = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        super().__init__(f"{operation} {path!r} failed" + (f": {cause}" if cause is not None else ""))


class ShapeMismatchError(NotenbuchError):
    """Stored data matches none of the known record shapes.

    Only raised inside the normalizer, which recovers from it.
    """

    pass
