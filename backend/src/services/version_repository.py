"""
Version repository: the storage port required by update resolution.

Defines the interface the resolver needs from storage (look up one version,
list a channel's versions above a creation-time cutoff, delete records) and
two implementations:

- SqlAlchemyVersionRepository: backed by the versions/assets tables
- InMemoryVersionRepository: dictionary-backed, for tests and embedding

Design Pattern: Strategy pattern for pluggable storage backends.
Rows are returned as frozen snapshots so resolution can never mutate
stored records.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Collection, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from backend.src.models import Asset, Version, DEFAULT_CHANNEL


@dataclass(frozen=True)
class AssetRecord:
    """
    Immutable view of a stored asset.

    Attributes:
        version_name: Name of the owning version
        platform: Stored platform identifier
        filetype: Extension tag (e.g., ".zip")
        name: Stored filename
        size: File size in bytes (None if unknown)
        hash: Content hash (None if unknown)
        id: Storage identifier (None for records not backed by a database)
    """
    version_name: str
    platform: str
    filetype: str
    name: str
    size: Optional[int] = None
    hash: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class VersionRecord:
    """
    Immutable view of a stored version and its assets.

    Attributes:
        name: Unique version name
        channel: Release channel
        created_at: Publication timestamp (sole recency signal)
        notes: Release notes (may be None or empty)
        assets: Assets in attachment order
        id: Storage identifier (None for records not backed by a database)
    """
    name: str
    channel: str
    created_at: datetime
    notes: Optional[str] = None
    assets: Tuple[AssetRecord, ...] = field(default_factory=tuple)
    id: Optional[int] = None

    def with_assets(self, assets: Iterable[AssetRecord]) -> "VersionRecord":
        """Return a copy of this record carrying the given assets."""
        return replace(self, assets=tuple(assets))

    def restricted_to(self, platforms: Optional[Collection[str]]) -> "VersionRecord":
        """Return a copy keeping only assets whose platform is in platforms."""
        if platforms is None:
            return self
        return self.with_assets(a for a in self.assets if a.platform in platforms)


class VersionRepository(ABC):
    """
    Abstract storage port for versions and their assets.

    Methods:
        find_one(): Look up one version by name
        find(): List a channel's versions newest first, above a cutoff
        find_latest(): Most recent version of a channel
        delete_asset(): Remove one asset record
        delete_version(): Remove one version record

    Usage:
        >>> repo = SqlAlchemyVersionRepository(db_session)
        >>> current = repo.find_one("1.0.0")
        >>> newer = repo.find("stable", created_after=current.created_at,
        ...                   platforms={"osx_64", "osx"})
    """

    @abstractmethod
    def find_one(self, name: str) -> Optional[VersionRecord]:
        """
        Look up a version by name.

        Args:
            name: Version name

        Returns:
            VersionRecord with all assets, or None if no such version exists
        """
        pass

    @abstractmethod
    def find(
        self,
        channel: str,
        created_after: Optional[datetime] = None,
        inclusive: bool = False,
        platforms: Optional[Collection[str]] = None,
    ) -> List[VersionRecord]:
        """
        List versions of a channel ordered by created_at descending.

        Args:
            channel: Release channel to list
            created_after: Creation-time cutoff; None lists the whole channel
            inclusive: If True, versions created exactly at the cutoff are
                included (>=); otherwise only strictly newer ones (>)
            platforms: If given, each returned version only carries assets
                whose platform is in this collection. Versions left without
                assets are still returned.

        Returns:
            Version records, most recent first
        """
        pass

    @abstractmethod
    def find_latest(self, channel: str) -> Optional[VersionRecord]:
        """Return the most recent version of a channel, or None if empty."""
        pass

    @abstractmethod
    def delete_asset(self, asset: AssetRecord) -> None:
        """Delete one asset record. Deleting an absent record is a no-op."""
        pass

    @abstractmethod
    def delete_version(self, name: str) -> None:
        """Delete one version record. Deleting an absent record is a no-op."""
        pass


def asset_to_record(asset: Asset, version_name: str) -> AssetRecord:
    """Convert Asset model to an immutable record."""
    return AssetRecord(
        version_name=version_name,
        platform=asset.platform,
        filetype=asset.filetype,
        name=asset.name,
        size=asset.size,
        hash=asset.hash,
        id=asset.id,
    )


def version_to_record(version: Version) -> VersionRecord:
    """Convert Version model (with its assets) to an immutable record."""
    return VersionRecord(
        name=version.name,
        channel=version.channel,
        created_at=version.created_at,
        notes=version.notes,
        assets=tuple(asset_to_record(a, version.name) for a in version.assets),
        id=version.id,
    )


class SqlAlchemyVersionRepository(VersionRepository):
    """
    Version repository backed by the versions and assets tables.

    Queries go through the given session; deletions commit immediately so
    each one is an independent unit of work.
    """

    def __init__(self, db: Session):
        """
        Initialize repository.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def find_one(self, name: str) -> Optional[VersionRecord]:
        version = self.db.query(Version).filter(Version.name == name).first()
        if version is None:
            return None
        return version_to_record(version)

    def find(
        self,
        channel: str,
        created_after: Optional[datetime] = None,
        inclusive: bool = False,
        platforms: Optional[Collection[str]] = None,
    ) -> List[VersionRecord]:
        query = self.db.query(Version).filter(Version.channel == channel)

        if created_after is not None:
            if inclusive:
                query = query.filter(Version.created_at >= created_after)
            else:
                query = query.filter(Version.created_at > created_after)

        versions = query.order_by(
            Version.created_at.desc(),
            Version.id.desc(),
        ).all()

        return [version_to_record(v).restricted_to(platforms) for v in versions]

    def find_latest(self, channel: str) -> Optional[VersionRecord]:
        version = (
            self.db.query(Version)
            .filter(Version.channel == channel)
            .order_by(Version.created_at.desc(), Version.id.desc())
            .first()
        )
        if version is None:
            return None
        return version_to_record(version)

    def delete_asset(self, asset: AssetRecord) -> None:
        if asset.id is None:
            return
        row = self.db.get(Asset, asset.id)
        if row is None:
            return
        self.db.delete(row)
        self.db.commit()

    def delete_version(self, name: str) -> None:
        version = self.db.query(Version).filter(Version.name == name).first()
        if version is None:
            return
        self.db.delete(version)
        self.db.commit()


class InMemoryVersionRepository(VersionRepository):
    """
    Dictionary-backed version repository.

    Versions are keyed by name; ties on created_at keep insertion order
    reversed, matching the database ordering by primary key.

    Usage:
        >>> repo = InMemoryVersionRepository()
        >>> repo.add(VersionRecord(name="1.0.0", channel="stable",
        ...                        created_at=datetime(2026, 1, 1)))
    """

    def __init__(self, versions: Iterable[VersionRecord] = ()):
        self._versions: Dict[str, VersionRecord] = {}
        for version in versions:
            self.add(version)

    def add(self, version: VersionRecord) -> VersionRecord:
        """Store a version, replacing any version of the same name."""
        self._versions[version.name] = version
        return version

    def all(self) -> List[VersionRecord]:
        """Return every stored version, in insertion order."""
        return list(self._versions.values())

    def find_one(self, name: str) -> Optional[VersionRecord]:
        return self._versions.get(name)

    def find(
        self,
        channel: str,
        created_after: Optional[datetime] = None,
        inclusive: bool = False,
        platforms: Optional[Collection[str]] = None,
    ) -> List[VersionRecord]:
        matching = []
        for version in self._versions.values():
            if version.channel != channel:
                continue
            if created_after is not None:
                if inclusive and version.created_at < created_after:
                    continue
                if not inclusive and version.created_at <= created_after:
                    continue
            matching.append(version)

        # reversed() + stable sort: later insertions win ties
        newest_first = sorted(
            reversed(matching),
            key=lambda v: v.created_at,
            reverse=True,
        )
        return [v.restricted_to(platforms) for v in newest_first]

    def find_latest(self, channel: str) -> Optional[VersionRecord]:
        versions = self.find(channel)
        return versions[0] if versions else None

    def delete_asset(self, asset: AssetRecord) -> None:
        version = self._versions.get(asset.version_name)
        if version is None:
            return
        self._versions[version.name] = version.with_assets(
            a for a in version.assets if a != asset
        )

    def delete_version(self, name: str) -> None:
        self._versions.pop(name, None)


def new_version_record(
    name: str,
    created_at: datetime,
    channel: str = DEFAULT_CHANNEL,
    notes: Optional[str] = None,
    assets: Iterable[Tuple[str, str, str, Optional[int], Optional[str]]] = (),
) -> VersionRecord:
    """
    Build a VersionRecord from plain values.

    Args:
        name: Version name
        created_at: Publication timestamp
        channel: Release channel (default: "stable")
        notes: Optional release notes
        assets: (platform, filetype, filename, size, hash) tuples

    Returns:
        VersionRecord whose assets reference the version by name
    """
    return VersionRecord(
        name=name,
        channel=channel,
        created_at=created_at,
        notes=notes,
        assets=tuple(
            AssetRecord(
                version_name=name,
                platform=platform,
                filetype=filetype,
                name=filename,
                size=size,
                hash=content_hash,
            )
            for platform, filetype, filename, size, content_hash in assets
        ),
    )
