# relaypanel/domain/__init__.py

"""
Domain components of the application.

This module exports the domain exceptions for easier imports.
"""

from relaypanel.domain.exceptions import (
    DomainException,
    ResourceNotFoundException,
    InvalidInputException,
    SyncOperationException,
    PublicIpLookupException,
    StorageOperationException,
)

__all__ = [
    "DomainException",
    "ResourceNotFoundException",
    "InvalidInputException",
    "SyncOperationException",
    "PublicIpLookupException",
    "StorageOperationException",
]
