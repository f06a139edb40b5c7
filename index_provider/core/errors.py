"""
Index Resource Errors
=====================

Every failure of the index resource is raised as an IndexResourceError
subclass carrying the operation, the index identity (when known) and the
underlying cause. Store errors are chained with ``raise ... from``.

Nothing here is retried or swallowed: the caller decides how to present it.
"""

from typing import Optional


class IndexResourceError(Exception):
    """Base class for all index resource failures"""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        identity: Optional[str] = None,
        cause: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.operation = operation
        self.identity = identity
        self.cause = cause

    def __str__(self) -> str:
        message = super().__str__()
        if self.cause is not None:
            return f"{message}: {self.cause}"
        return message


class MalformedIdentity(IndexResourceError):
    """Import id does not split into <database>.<collection>.<index_name>"""
    pass


class UnsupportedDirectionType(IndexResourceError):
    """Native key value is neither an integer nor a string"""
    pass


class InvalidDirectionValue(IndexResourceError):
    """Native integer key value is not 1 or -1"""
    pass


class IndexNotFound(IndexResourceError):
    pass


class IndexDescriptionInvalid(IndexResourceError):
    """Index reported by the server cannot be mapped back to a declared spec"""
    pass


class IndexListingFailed(IndexResourceError):
    pass


class IndexCreationFailed(IndexResourceError):
    pass


class IndexDeletionFailed(IndexResourceError):
    pass


class UnexpectedUpdate(IndexResourceError):
    """An in-place update was requested on an immutable index"""
    pass


class OperationCancelled(IndexResourceError):
    """Store call exceeded its deadline and was aborted"""
    pass


class ProviderConfigError(IndexResourceError):
    """MongoDB connection settings are missing or unusable"""
    pass
