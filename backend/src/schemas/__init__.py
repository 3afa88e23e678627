"""
Pydantic schemas for API request/response validation.
"""

from backend.src.schemas.update import (
    AssetResponse,
    ReleaseNotesResponse,
    UpdateResponse,
    VersionResponse,
    format_pub_date,
)

__all__ = [
    "AssetResponse",
    "ReleaseNotesResponse",
    "UpdateResponse",
    "VersionResponse",
    "format_pub_date",
]
