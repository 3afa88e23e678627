"""
Version destruction service.

Destroying a version removes every asset (file and record) and then the
version record itself.

Design:
- One unit of work per asset: file deletion and record deletion run
  concurrently and the unit fails if either half fails
- Units run concurrently with each other and are all joined before the
  version record is touched
- A failed unit does not stop the others; the aggregate failure is reported
  once every unit has finished and the version record is kept
- File deletion runs in worker threads; record deletion stays on the event
  loop thread so the database session is never shared across threads
- The prior full record is returned so transport-side collaborators can
  announce the destruction
"""

import asyncio
from typing import List, Tuple

from backend.src.services.asset_storage import AssetStorage
from backend.src.services.exceptions import AssetDeletionError, NotFoundError
from backend.src.services.version_repository import (
    AssetRecord,
    VersionRecord,
    VersionRepository,
)
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


class VersionService:
    """
    Service for destroying versions together with their assets.

    Usage:
        >>> service = VersionService(repository, LocalAssetStorage("/srv/releases"))
        >>> destroyed = await service.destroy("1.0.0")
    """

    def __init__(self, repository: VersionRepository, storage: AssetStorage):
        """
        Initialize version service.

        Args:
            repository: Version storage port
            storage: Asset file storage
        """
        self.repository = repository
        self.storage = storage

    async def destroy(self, name: str) -> VersionRecord:
        """
        Destroy a version, its asset files and its asset records.

        Args:
            name: Version name

        Returns:
            The version record as it was before destruction

        Raises:
            NotFoundError: If no version has this name
            AssetDeletionError: If any asset could not be deleted; all other
                assets have been deleted and the version record is kept
        """
        version = self.repository.find_one(name)
        if version is None:
            raise NotFoundError("Version", name)

        results = await asyncio.gather(
            *(self._destroy_asset(asset) for asset in version.assets),
            return_exceptions=True,
        )

        failures: List[Tuple[str, BaseException]] = [
            (asset.name, result)
            for asset, result in zip(version.assets, results)
            if isinstance(result, BaseException)
        ]
        if failures:
            for asset_name, error in failures:
                logger.error(
                    "Failed to destroy asset",
                    extra={
                        "version": name,
                        "asset": asset_name,
                        "error_type": type(error).__name__,
                        "error": str(error),
                    },
                )
            raise AssetDeletionError(name, failures)

        self.repository.delete_version(name)
        logger.info(
            "Destroyed version",
            extra={"version": name, "channel": version.channel, "assets": len(version.assets)},
        )
        return version

    async def _destroy_asset(self, asset: AssetRecord) -> None:
        file_result, record_result = await asyncio.gather(
            asyncio.to_thread(self.storage.delete_file, asset),
            self._delete_asset_record(asset),
            return_exceptions=True,
        )
        for result in (file_result, record_result):
            if isinstance(result, BaseException):
                raise result

        logger.info(
            "Destroyed asset",
            extra={"version": asset.version_name, "asset": asset.name, "platform": asset.platform},
        )

    async def _delete_asset_record(self, asset: AssetRecord) -> None:
        self.repository.delete_asset(asset)
