"""
File storage for release asset files.

Defines the interface version destruction needs from file storage and a
local filesystem implementation.

Design Pattern: Strategy pattern for pluggable storage backends
"""

from abc import ABC, abstractmethod

from backend.src.services.download_service import resolve_asset_path
from backend.src.services.exceptions import ValidationError
from backend.src.services.version_repository import AssetRecord
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


class AssetStorage(ABC):
    """
    Abstract base class for asset file storage.

    Implementations must make delete_file idempotent: deleting a file that
    is already gone succeeds.
    """

    @abstractmethod
    def delete_file(self, asset: AssetRecord) -> None:
        """
        Delete the file backing an asset.

        Args:
            asset: Asset whose file should be removed

        Raises:
            ValidationError: If the asset does not map to a valid file path
            OSError: If the file exists but cannot be removed
        """
        pass


class LocalAssetStorage(AssetStorage):
    """
    Asset files stored on the local filesystem as <asset_dir>/<version>/<filename>.

    Usage:
        >>> storage = LocalAssetStorage("/srv/releases")
        >>> storage.delete_file(asset)
    """

    def __init__(self, asset_dir: str):
        """
        Initialize local storage.

        Args:
            asset_dir: Root directory of asset files
        """
        self.asset_dir = asset_dir

    def delete_file(self, asset: AssetRecord) -> None:
        file_path, error = resolve_asset_path(
            asset_dir=self.asset_dir,
            version=asset.version_name,
            filename=asset.name,
        )
        if error:
            raise ValidationError(
                f"Cannot delete file of asset '{asset.name}': {error}",
                field="name",
            )

        try:
            file_path.unlink()
        except FileNotFoundError:
            logger.debug(
                "Asset file already absent",
                extra={"version": asset.version_name, "asset": asset.name},
            )
            return

        logger.info(
            "Deleted asset file",
            extra={"version": asset.version_name, "asset": asset.name, "path": str(file_path)},
        )
