"""
Version model for published application releases.

A version is the aggregate root of the release catalogue: it owns its
downloadable assets and carries the release notes shown to updating clients.

Design Rationale:
- Recency is defined only by created_at; version names are never parsed
  as semantic versions
- Channels partition versions into independent release tracks
- Assets are deleted together with their version (delete-orphan cascade)
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Text, Index
from sqlalchemy.orm import relationship, validates

from backend.src.models import Base


DEFAULT_CHANNEL = "stable"


class Version(Base):
    """
    Published application release.

    Attributes:
        id: Primary key (internal, never exposed)
        name: Unique release name (e.g., "1.2.0", "2.0.0-beta.1")
        channel: Release track (e.g., "stable", "beta")
        notes: Optional Markdown release notes
        created_at: Publication timestamp, the sole ordering key
        updated_at: Last modification timestamp
        assets: Downloadable files, in attachment order

    Indexes:
        - name (unique)
        - (channel, created_at) for the "newer versions" query
    """

    __tablename__ = "versions"

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(100), nullable=False, unique=True, index=True)
    channel = Column(String(50), nullable=False, default=DEFAULT_CHANNEL)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    assets = relationship(
        "Asset",
        back_populates="version",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Asset.id",
    )

    __table_args__ = (
        Index('ix_versions_channel_created_at', 'channel', 'created_at'),
    )

    @validates('name')
    def validate_name(self, key: str, value: str) -> str:
        """Validate name is present and usable as a URL path segment."""
        if not value or not value.strip():
            raise ValueError("Version name is required")
        value = value.strip()
        if '/' in value or '\\' in value:
            raise ValueError("Version name must not contain path separators (/ or \\)")
        return value

    @validates('channel')
    def validate_channel(self, key: str, value: str) -> str:
        """Default empty channels to stable."""
        if not value or not value.strip():
            return DEFAULT_CHANNEL
        return value.strip()

    def __repr__(self) -> str:
        return (
            f"<Version(name='{self.name}', channel='{self.channel}', "
            f"created_at={self.created_at})>"
        )
