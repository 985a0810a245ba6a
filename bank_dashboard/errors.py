"""
API Error Module

Error taxonomy shared by the stores, the transaction engine and the HTTP
layer. Every error carries the HTTP status and machine-readable code it is
reported with.
"""

from contextlib import contextmanager
from typing import Any, Dict, List, Optional
import logging

from .storage import StorageError


class ApiError(Exception):
    """Base class for errors reported to API callers"""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON error body"""
        body: Dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = list(self.details)
        return body


class ValidationError(ApiError):
    """One or more request fields violated a rule"""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation failed", details: Optional[List[str]] = None):
        super().__init__(message, details)


class NotFoundError(ApiError):
    """Referenced entity does not exist"""

    status_code = 404
    code = "NOT_FOUND"


class InsufficientFundsError(ApiError):
    """Debit larger than the current balance"""

    status_code = 400
    code = "INSUFFICIENT_FUNDS"

    def __init__(self, message: str = "Insufficient funds for this transaction"):
        super().__init__(message)


class InternalError(ApiError):
    """Storage failure; the message never exposes internals"""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


@contextmanager
def storage_errors(message: str, logger: Optional[logging.Logger] = None):
    """Translate StorageError raised inside the block into InternalError"""
    try:
        yield
    except StorageError as e:
        if logger:
            logger.error(f"{message}: {e}")
        raise InternalError(message) from e
