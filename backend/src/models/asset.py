"""
Asset model for per-platform downloadable release files.

Stores one downloadable file (installer, update archive, Squirrel package)
belonging to a version.

Design Rationale:
- Child entity of Version, always accessed through its parent
- CASCADE delete: assets have no meaning without their version
- size and hash are nullable at the storage level; the RELEASES manifest
  treats their absence as a data-integrity error
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, BigInteger, DateTime, ForeignKey, Index
from sqlalchemy.orm import validates, relationship

from backend.src.models import Base


class Asset(Base):
    """
    Downloadable file attached to a version.

    Attributes:
        id: Primary key (internal only, also the attachment order)
        version_id: FK to versions.id (CASCADE delete)
        platform: Canonical platform identifier (e.g., 'osx_64', 'windows_32')
        filetype: Extension tag including the dot (e.g., '.zip', '.nupkg')
        name: Stored filename (no path separators)
        size: File size in bytes
        hash: Content hash (SHA-1 for Squirrel.Windows packages)
        created_at: Creation timestamp
    """

    __tablename__ = "assets"

    id = Column(Integer, primary_key=True, autoincrement=True)

    version_id = Column(
        Integer,
        ForeignKey("versions.id", ondelete="CASCADE"),
        nullable=False,
    )

    platform = Column(String(50), nullable=False)
    filetype = Column(String(20), nullable=False)
    name = Column(String(255), nullable=False)
    size = Column(BigInteger, nullable=True)
    hash = Column(String(128), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    version = relationship("Version", back_populates="assets")

    __table_args__ = (
        Index('ix_assets_version_id', 'version_id'),
        Index('ix_assets_platform', 'platform'),
    )

    @validates('platform')
    def validate_platform(self, key: str, value: str) -> str:
        """Validate platform is present."""
        if not value or not value.strip():
            raise ValueError("Platform is required")
        return value.strip()

    @validates('filetype')
    def validate_filetype(self, key: str, value: str) -> str:
        """Normalize filetype to a lowercase, dot-prefixed extension."""
        if not value or not value.strip():
            raise ValueError("Filetype is required")
        value = value.strip().lower()
        if not value.startswith('.'):
            value = '.' + value
        return value

    @validates('name')
    def validate_name(self, key: str, value: str) -> str:
        """Validate filename contains no path separators.

        Args:
            key: Field name being validated (always "name").
            value: Filename string to validate.

        Returns:
            Trimmed filename string.

        Raises:
            ValueError: If value is empty or contains path separators (/ or \\).
        """
        if not value or not value.strip():
            raise ValueError("Filename is required")
        if '/' in value or '\\' in value:
            raise ValueError("Filename must not contain path separators (/ or \\)")
        return value.strip()

    def __repr__(self) -> str:
        return (
            f"<Asset(version_id={self.version_id}, "
            f"platform='{self.platform}', name='{self.name}')>"
        )
