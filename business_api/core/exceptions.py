"""
Custom Exceptions

This module defines the error taxonomy shared by services and the API layer.
Every exception carries the HTTP status it maps to, so the exception
handlers in the API layer stay a thin translation step.

Taxonomy:
- InvalidArgumentError: malformed or out-of-range input (400)
- NotFoundError: referenced business or child does not exist, or a search
  matched nothing (404)
- StorageFailureError: unexpected storage backend error (500)
"""

from typing import Optional


class BusinessDirectoryException(Exception):
    """Base exception for the business directory service."""

    http_status: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidArgumentError(BusinessDirectoryException):
    """Raised when user-supplied input fails validation."""

    http_status = 400


class NotFoundError(BusinessDirectoryException):
    """Raised when a requested resource does not exist."""

    http_status = 404


class BusinessNotFoundError(NotFoundError):
    """Raised when a business id does not exist."""

    def __init__(self, business_id: str):
        self.business_id = business_id
        super().__init__("The specified business does not exist")


class ChildNotFoundError(NotFoundError):
    """Raised when a location/hour/service/review does not exist under its business."""

    def __init__(self, kind: str, child_id: str, business_id: str):
        self.kind = kind
        self.child_id = child_id
        self.business_id = business_id
        super().__init__(f"The specified {kind} does not exist")


class NoSearchResultsError(NotFoundError):
    """Raised when a business search matches nothing."""

    def __init__(self):
        super().__init__("no Businesses matching the specified criteria could be found")


class StorageFailureError(BusinessDirectoryException):
    """Raised when database operations fail."""

    http_status = 500

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
