"""
Service layer for business logic.

This module exports the service classes and storage ports used by the API.
"""

from backend.src.services.exceptions import (
    ServiceError,
    NotFoundError,
    ValidationError,
    DataIntegrityError,
    AssetDeletionError,
)
from backend.src.services.version_repository import (
    AssetRecord,
    VersionRecord,
    VersionRepository,
    SqlAlchemyVersionRepository,
    InMemoryVersionRepository,
)
from backend.src.services.asset_storage import AssetStorage, LocalAssetStorage
from backend.src.services.update_service import UpdateService, UpdateDecision, WindowsReleases
from backend.src.services.version_service import VersionService

__all__ = [
    "ServiceError",
    "NotFoundError",
    "ValidationError",
    "DataIntegrityError",
    "AssetDeletionError",
    "AssetRecord",
    "VersionRecord",
    "VersionRepository",
    "SqlAlchemyVersionRepository",
    "InMemoryVersionRepository",
    "AssetStorage",
    "LocalAssetStorage",
    "UpdateService",
    "UpdateDecision",
    "WindowsReleases",
    "VersionService",
]
