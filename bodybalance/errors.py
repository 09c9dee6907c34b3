"""
Exception types for bodybalance.
"""


class BodyBalanceError(Exception):
    """Base exception for bodybalance errors."""

    pass


class InvalidArgument(BodyBalanceError, ValueError):
    """Raised for negative XP awards, malformed dates or unknown challenge ids."""

    pass


class MissingProfile(BodyBalanceError):
    """Raised when an operation needs a user profile and none exists yet."""

    pass


class StorageUnavailable(BodyBalanceError):
    """Raised when the blob store cannot be read or written."""

    pass
