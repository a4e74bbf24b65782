class ConfigurationError(ValueError):
    """Raised when the error service is configured with unusable values.

    Covers unknown database types and table names that are not plain SQL
    identifiers. Raised at construction time, never from inside a wrapped
    handler.
    """


class NotConnectedError(RuntimeError):
    """Raised when a persistence backend is used before ``connect()``."""

    def __init__(self, message: str = "Not connected"):
        super().__init__(message)
