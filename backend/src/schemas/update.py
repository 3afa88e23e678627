"""
Pydantic schemas for update API responses.

Provides serialization for:
- Update responses consumed by Squirrel.Mac-style updaters
- Release notes responses
- Version records returned by destructive endpoints

Design:
- Field names follow the updater wire format (pub_date, not created_at)
- Timestamps are rendered as UTC ISO 8601 with millisecond precision and
  a trailing "Z"
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from backend.src.services.update_service import UpdateDecision
from backend.src.services.version_repository import AssetRecord, VersionRecord


def format_pub_date(value: datetime) -> str:
    """
    Format a timestamp the way updaters expect pub_date.

    Args:
        value: Naive UTC or timezone-aware datetime

    Returns:
        ISO 8601 string, e.g. "2026-01-05T12:00:00.000Z"
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


class UpdateResponse(BaseModel):
    """
    Update available for the requesting client.

    Example:
        >>> UpdateResponse(
        ...     url="https://updates.example.com/download/version/1.2.0/osx_64?filetype=zip",
        ...     name="1.2.0",
        ...     notes="## 1.2.0\\nfix B",
        ...     pub_date="2026-01-05T12:00:00.000Z",
        ... )
    """

    url: str = Field(..., description="Download URL of the update package")
    name: str = Field(..., description="Target version name")
    notes: str = Field(..., description="Markdown notes of every skipped release")
    pub_date: str = Field(..., description="Target publication date (ISO 8601)")

    @classmethod
    def from_decision(cls, decision: UpdateDecision) -> "UpdateResponse":
        return cls(
            url=decision.url,
            name=decision.name,
            notes=decision.notes,
            pub_date=format_pub_date(decision.created_at),
        )


class ReleaseNotesResponse(BaseModel):
    """Release notes of one version."""

    notes: Optional[str] = Field(None, description="Markdown release notes")
    pub_date: str = Field(..., description="Publication date (ISO 8601)")

    @classmethod
    def from_record(cls, version: VersionRecord) -> "ReleaseNotesResponse":
        return cls(notes=version.notes, pub_date=format_pub_date(version.created_at))


class AssetResponse(BaseModel):
    """Response schema for an asset."""

    platform: str = Field(..., description="Platform identifier")
    filetype: str = Field(..., description="Extension tag (e.g., '.zip')")
    name: str = Field(..., description="Stored filename")
    size: Optional[int] = Field(None, description="File size in bytes")
    hash: Optional[str] = Field(None, description="Content hash")

    @classmethod
    def from_record(cls, asset: AssetRecord) -> "AssetResponse":
        return cls(
            platform=asset.platform,
            filetype=asset.filetype,
            name=asset.name,
            size=asset.size,
            hash=asset.hash,
        )


class VersionResponse(BaseModel):
    """Response schema for a version and its assets."""

    name: str = Field(..., description="Version name")
    channel: str = Field(..., description="Release channel")
    notes: Optional[str] = Field(None, description="Markdown release notes")
    created_at: str = Field(..., description="Publication date (ISO 8601)")
    assets: List[AssetResponse] = Field(default_factory=list, description="Assets in attachment order")

    @classmethod
    def from_record(cls, version: VersionRecord) -> "VersionResponse":
        return cls(
            name=version.name,
            channel=version.channel,
            notes=version.notes,
            created_at=format_pub_date(version.created_at),
            assets=[AssetResponse.from_record(a) for a in version.assets],
        )
