"""
Error taxonomy for Driver Log.

Pricing and aggregation never raise. Only draft validation and the storage
boundary fail, and every failure carries a message that can be shown as-is.
"""


class DriverLogError(Exception):
    """Base class for all application errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DriverLogError):
    """A submitted draft was rejected; the user must fix it and resubmit."""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field


class StorageError(DriverLogError):
    """Any failure reported by a record, account or photo store."""


class QuotaExceededError(StorageError):
    """Local persistence is full. The collection was not (fully) written."""
