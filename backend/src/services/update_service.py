"""
Update resolution service.

Answers the three questions an updating client asks:

- Is there a newer release for my platform and channel, where do I download
  it and what changed since my version? (resolve_update)
- Which packages make up the latest Squirrel.Windows release?
  (resolve_windows_releases)
- What are the notes of a given release? (get_release_notes)

Design:
- Recency is creation order only; version names are never compared
- The general path treats an unknown current version leniently (every
  version of the channel counts as newer) while the windows path rejects
  it; both policies are part of the client contract
- The general path excludes versions created at the cutoff instant, the
  windows path includes them
- "No update" is a None result, never an exception
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, List, Optional

from backend.src.models import DEFAULT_CHANNEL
from backend.src.services.download_service import (
    UPDATE_PACKAGE_FILETYPE,
    build_asset_download_url,
    build_update_download_url,
)
from backend.src.services.exceptions import NotFoundError, ValidationError
from backend.src.services.platform_service import normalize
from backend.src.services.release_notes import aggregate_release_notes
from backend.src.services.version_repository import VersionRecord, VersionRepository
from backend.src.services.windows_release_service import (
    RELEASES_FILENAME,
    generate_releases_file,
)
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


@dataclass(frozen=True)
class UpdateDecision:
    """
    An update offered to a client.

    Attributes:
        name: Target version name
        created_at: Target version publication timestamp
        notes: Aggregated notes of every skipped release with a package
        url: Absolute download URL of the target's update package
    """
    name: str
    created_at: datetime
    notes: str
    url: str


@dataclass(frozen=True)
class WindowsReleases:
    """
    Serialized RELEASES manifest of the latest Squirrel.Windows release.

    Attributes:
        version: Selected version; asset names hold full download URLs
        content: Manifest bytes
    """
    version: VersionRecord
    content: bytes
    filename: str = RELEASES_FILENAME

    @property
    def content_length(self) -> int:
        """Exact byte length of the manifest."""
        return len(self.content)


@dataclass
class _ResolutionWalk:
    """Accumulators of the newest-first walk over candidate versions."""
    target: Optional[VersionRecord] = None
    noted: List[VersionRecord] = field(default_factory=list)


def _update_packages(version: VersionRecord) -> VersionRecord:
    """Restrict a version to its update packages."""
    return version.with_assets(
        a for a in version.assets if a.filetype == UPDATE_PACKAGE_FILETYPE
    )


def walk_candidates(versions: Iterable[VersionRecord]) -> _ResolutionWalk:
    """
    Fold newest-first versions into an update target and notes sources.

    Every version is visited. Versions without an update package are
    skipped; the first version with one becomes the target, and every
    version with one and with notes is kept for the notes aggregate.

    Args:
        versions: Candidate versions, newest first, assets already
            restricted to the requested platforms

    Returns:
        Walk result with the optional target and the noted versions in
        newest-first order
    """
    walk = _ResolutionWalk()
    for version in versions:
        packages = _update_packages(version)
        if not packages.assets:
            continue
        if walk.target is None:
            walk.target = packages
        if packages.notes:
            walk.noted.append(packages)
    return walk


def _require(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"Requires `{field_name}` parameter", field=field_name)
    return value


class UpdateService:
    """
    Service resolving updates against a version repository.

    Usage:
        >>> service = UpdateService(repository, base_url="https://updates.example.com")
        >>> decision = service.resolve_update("1.0.0", "darwin", "stable")
        >>> if decision is None:
        ...     print("Up to date")
    """

    def __init__(self, repository: VersionRepository, base_url: str):
        """
        Initialize update service.

        Args:
            repository: Version storage port
            base_url: Origin used for every download link (APP_URL)
        """
        self.repository = repository
        self.base_url = base_url

    def resolve_update(
        self,
        current_version_name: str,
        platform: str,
        channel: Optional[str] = DEFAULT_CHANNEL,
    ) -> Optional[UpdateDecision]:
        """
        Resolve the update for a client (Squirrel.Mac and generic updaters).

        Args:
            current_version_name: Version the client runs
            platform: Client platform token (normalized internally)
            channel: Release channel (default: "stable")

        Returns:
            UpdateDecision, or None when no newer release has a package for
            the platform

        Raises:
            ValidationError: If current_version_name or platform is empty
        """
        _require(current_version_name, "version")
        _require(platform, "platform")
        channel = channel or DEFAULT_CHANNEL
        platforms = normalize(platform)

        logger.debug(
            "Update search query",
            extra={
                "platforms": sorted(platforms),
                "current_version": current_version_name,
                "channel": channel,
            },
        )

        current = self.repository.find_one(current_version_name)
        # An unknown current version widens the search to the whole channel
        cutoff = current.created_at if current is not None else None

        newer_versions = self.repository.find(
            channel,
            created_after=cutoff,
            inclusive=False,
            platforms=platforms,
        )
        walk = walk_candidates(newer_versions)

        if walk.target is None or walk.target.name == current_version_name:
            logger.debug(
                "No update available",
                extra={"current_version": current_version_name, "channel": channel},
            )
            return None

        target = walk.target
        decision = UpdateDecision(
            name=target.name,
            created_at=target.created_at,
            notes=aggregate_release_notes(walk.noted),
            url=build_update_download_url(
                self.base_url,
                target.name,
                target.assets[0].platform,
            ),
        )

        logger.info(
            "Resolved update",
            extra={
                "current_version": current_version_name,
                "target_version": target.name,
                "channel": channel,
                "skipped_with_notes": len(walk.noted),
            },
        )
        return decision

    def resolve_windows_releases(
        self,
        current_version_name: str,
        platform: str,
        channel: Optional[str] = DEFAULT_CHANNEL,
    ) -> WindowsReleases:
        """
        Build the RELEASES manifest for a Squirrel.Windows client.

        Args:
            current_version_name: Version the client runs (must exist)
            platform: Client platform token (normalized internally)
            channel: Release channel (default: "stable")

        Returns:
            WindowsReleases for the most recent version, created at or after
            the current one, that has assets for the platform

        Raises:
            ValidationError: If current_version_name or platform is empty
            NotFoundError: If the current version is unknown, or no version
                has assets for the platform
            DataIntegrityError: If a selected asset lacks hash, name or size
        """
        _require(current_version_name, "version")
        _require(platform, "platform")
        channel = channel or DEFAULT_CHANNEL
        platforms = normalize(platform)

        logger.debug(
            "Windows update search query",
            extra={
                "platforms": sorted(platforms),
                "current_version": current_version_name,
                "channel": channel,
            },
        )

        current = self.repository.find_one(current_version_name)
        if current is None:
            raise NotFoundError("Version", current_version_name)

        candidates = self.repository.find(
            channel,
            created_after=current.created_at,
            inclusive=True,
            platforms=platforms,
        )
        latest = next((v for v in candidates if v.assets), None)
        if latest is None:
            raise NotFoundError(
                "Release",
                f"for platform '{platform}' in channel '{channel}'",
            )

        published = latest.with_assets(
            replace(
                asset,
                name=build_asset_download_url(self.base_url, latest.name, asset.name),
            )
            for asset in latest.assets
        )

        return WindowsReleases(
            version=published,
            content=generate_releases_file(published.assets),
        )

    def get_release_notes(
        self,
        version_name: Optional[str] = None,
        channel: Optional[str] = DEFAULT_CHANNEL,
    ) -> VersionRecord:
        """
        Get the version whose notes were requested.

        Args:
            version_name: Version name; None selects the most recent version
                of the channel
            channel: Channel used when version_name is None (default: "stable")

        Returns:
            The version record (notes and created_at)

        Raises:
            NotFoundError: If the named version does not exist, or the
                channel has no versions
        """
        if version_name:
            version = self.repository.find_one(version_name)
            if version is None:
                raise NotFoundError("Version", version_name)
            return version

        channel = channel or DEFAULT_CHANNEL
        version = self.repository.find_latest(channel)
        if version is None:
            raise NotFoundError("Version", f"latest in channel '{channel}'")
        return version
