"""
Custom exceptions for Mishmar.
"""


class MishmarException(Exception):
    """Base exception for all Mishmar exceptions."""
    pass


class StorageSchemaError(MishmarException):
    """Raised when a stored collection has a shape or version we cannot read."""
    pass
