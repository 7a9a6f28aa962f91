# relaypanel/domain/exceptions.py

"""
Domain exceptions for the application.

This module defines pure domain exceptions that carry a readable message
and an internal code. Inbound adapters translate the internal code into
the transport-specific status (see the exception middleware).
"""

from typing import Any, Dict, Optional


class DomainException(Exception):
    """
    Base exception for all application errors.
    """

    def __init__(self, detail: Any = None, internal_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.internal_code = internal_code

    def __str__(self) -> str:
        return str(self.detail)


class ResourceNotFoundException(DomainException):
    """Resource not found."""

    def __init__(self, detail: str = "Resource not found", resource_id: Any = None):
        resource_info = f" (ID: {resource_id})" if resource_id is not None else ""
        super().__init__(
            detail=f"{detail}{resource_info}",
            internal_code="RESOURCE_NOT_FOUND"
        )
        self.resource_id = resource_id


class InvalidInputException(DomainException):
    """Invalid input data: malformed secret, bad expiry, empty required field."""

    def __init__(self, detail: str = "Invalid input data", fields: Optional[Dict[str, str]] = None):
        field_errors = ""
        if fields:
            field_errors = ": " + ", ".join([f"{field}: {error}" for field, error in fields.items()])

        super().__init__(
            detail=f"{detail}{field_errors}",
            internal_code="INVALID_INPUT"
        )
        self.details = fields or {}


class SyncOperationException(DomainException):
    """Writing the relay configuration or reloading the relay failed."""

    def __init__(self, detail: str = "Relay synchronization failed", original_error: Optional[Exception] = None):
        super().__init__(detail=detail, internal_code="SYNC_ERROR")
        self.original_error = original_error


class PublicIpLookupException(DomainException):
    """No public IP provider returned a usable address."""

    def __init__(self, detail: str = "Failed to detect public IP"):
        super().__init__(detail=detail, internal_code="LOOKUP_ERROR")


class StorageOperationException(DomainException):
    """Error reading or writing persisted state."""

    def __init__(self, detail: str = "Error accessing persisted state",
                 original_error: Optional[Exception] = None):
        error_info = f": {str(original_error)}" if original_error else ""
        super().__init__(
            detail=f"{detail}{error_info}",
            internal_code="STORAGE_OPERATION_ERROR"
        )
        self.original_error = original_error
