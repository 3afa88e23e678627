"""
Custom exceptions for service layer.

Provides specific exception types for business logic errors
that can be translated to appropriate HTTP responses.

"No update available" is not an exception: resolution
returns None for it.
"""

from typing import Any, List, Optional, Tuple


class ServiceError(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundError(ServiceError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class DataIntegrityError(ServiceError):
    """Raised when stored data lacks a field an output format requires.

    Used by the RELEASES manifest when a selected asset has no hash,
    name or size.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class AssetDeletionError(ServiceError):
    """Raised when one or more asset deletions failed while destroying a version.

    Every other asset deletion has still run to completion; the version
    record itself is kept.
    """

    def __init__(self, version_name: str, failures: List[Tuple[str, BaseException]]):
        self.version_name = version_name
        self.failures = failures
        failed_names = ", ".join(name for name, _ in failures)
        self.message = (
            f"Failed to delete {len(failures)} asset(s) of version "
            f"'{version_name}': {failed_names}"
        )
        super().__init__(self.message)
