"""
Version management API endpoints.

Provides:
- DELETE /api/versions/{name}: destroy a version with its assets
"""

from fastapi import APIRouter, Depends, HTTPException, status

from backend.src.api.updates import get_version_repository
from backend.src.config.settings import AppSettings, get_settings
from backend.src.schemas.update import VersionResponse
from backend.src.services.asset_storage import AssetStorage, LocalAssetStorage
from backend.src.services.exceptions import AssetDeletionError, NotFoundError
from backend.src.services.version_repository import VersionRepository
from backend.src.services.version_service import VersionService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(prefix="/versions", tags=["Versions"])


def get_asset_storage(settings: AppSettings = Depends(get_settings)) -> AssetStorage:
    """Create local asset storage rooted at the configured asset directory."""
    return LocalAssetStorage(settings.asset_dir)


def get_version_service(
    repository: VersionRepository = Depends(get_version_repository),
    storage: AssetStorage = Depends(get_asset_storage),
) -> VersionService:
    """Create VersionService instance."""
    return VersionService(repository=repository, storage=storage)


@router.delete("/{name}", response_model=VersionResponse)
async def destroy_version(
    name: str,
    service: VersionService = Depends(get_version_service),
):
    """
    Destroy a version, its asset files and its asset records.

    Returns:
        The version as it was before destruction

    Raises:
        404: Version not found
        500: One or more assets could not be deleted; the version is kept
    """
    try:
        destroyed = await service.destroy(name)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except AssetDeletionError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message
        )

    logger.info("Version destroyed via API", extra={"version": destroyed.name})
    return VersionResponse.from_record(destroyed)
