"""Exception hierarchy."""


class GapLogError(Exception):
    """Base class for all GapLog errors."""


class NotFoundError(GapLogError, LookupError):
    """Raised when a referenced record does not exist."""


class InvalidDataError(GapLogError, ValueError):
    """Raised when a record or argument is malformed."""
