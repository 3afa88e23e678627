"""
Update API endpoints consumed by application updaters.

Provides:
- GET /update: query-string entry point, redirects to the path form
- GET /update/{platform}/{version}[/{channel}]: Squirrel.Mac-style JSON update
- GET /update/{platform}/{version}[/{channel}]/RELEASES: Squirrel.Windows manifest
- GET /notes[/{version}]: release notes, JSON or plain text

Design:
- 204 No Content when the client is up to date, 404 only when a resource
  the contract requires is missing
- The channel defaults to the configured default channel ("stable")
- RELEASES is always sent fully buffered with an exact Content-Length
"""

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.orm import Session

from backend.src.config.settings import AppSettings, get_settings
from backend.src.db.database import get_db
from backend.src.schemas.update import ReleaseNotesResponse, UpdateResponse
from backend.src.services.exceptions import (
    DataIntegrityError,
    NotFoundError,
    ValidationError,
)
from backend.src.services.update_service import UpdateService
from backend.src.services.version_repository import (
    SqlAlchemyVersionRepository,
    VersionRepository,
)
from backend.src.services.windows_release_service import RELEASES_MEDIA_TYPE
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(tags=["Updates"])


# ============================================================================
# Dependencies
# ============================================================================


def get_version_repository(db: Session = Depends(get_db)) -> VersionRepository:
    """Create the database-backed version repository."""
    return SqlAlchemyVersionRepository(db)


def get_update_service(
    repository: VersionRepository = Depends(get_version_repository),
    settings: AppSettings = Depends(get_settings),
) -> UpdateService:
    """Create UpdateService instance with the configured download origin."""
    return UpdateService(repository=repository, base_url=settings.app_url)


# ============================================================================
# Update Endpoints
# ============================================================================


@router.get("/update", status_code=status.HTTP_302_FOUND)
async def redirect_update(
    platform: Optional[str] = Query(None, description="Client platform"),
    version: Optional[str] = Query(None, description="Client version"),
    channel: Optional[str] = Query(None, description="Release channel"),
):
    """
    Redirect a query-string update request to its path form.

    Returns:
        302 redirect to /update/{platform}/{version}[/{channel}]

    Raises:
        400: Missing version or platform
    """
    if not version:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Requires "version" parameter'
        )
    if not platform:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Requires "platform" parameter'
        )

    target = f"/update/{quote(platform, safe='')}/{quote(version, safe='')}"
    if channel:
        target += f"/{quote(channel, safe='')}"
    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)


def _windows_releases_response(
    service: UpdateService,
    platform: str,
    version: str,
    channel: str,
) -> Response:
    try:
        releases = service.resolve_windows_releases(version, platform, channel)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DataIntegrityError as e:
        logger.error(
            "Cannot serialize RELEASES",
            extra={
                "platform": platform,
                "current_version": version,
                "channel": channel,
                "field": e.field,
                "error": e.message,
            },
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message
        )

    return Response(
        content=releases.content,
        media_type=RELEASES_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{releases.filename}"',
            "Content-Length": str(releases.content_length),
        },
    )


@router.get("/update/{platform}/{version}/RELEASES")
async def windows_releases(
    platform: str,
    version: str,
    service: UpdateService = Depends(get_update_service),
    settings: AppSettings = Depends(get_settings),
):
    """
    Serve the Squirrel.Windows RELEASES manifest on the default channel.

    Raises:
        404: Unknown current version, or no release for the platform
    """
    return _windows_releases_response(service, platform, version, settings.default_channel)


@router.get("/update/{platform}/{version}/{channel}/RELEASES")
async def windows_releases_for_channel(
    platform: str,
    version: str,
    channel: str,
    service: UpdateService = Depends(get_update_service),
):
    """
    Serve the Squirrel.Windows RELEASES manifest of a channel.

    Raises:
        404: Unknown current version, or no release for the platform
    """
    return _windows_releases_response(service, platform, version, channel)


def _update_response(
    service: UpdateService,
    platform: str,
    version: str,
    channel: str,
):
    try:
        decision = service.resolve_update(version, platform, channel)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    if decision is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return UpdateResponse.from_decision(decision)


@router.get(
    "/update/{platform}/{version}",
    response_model=UpdateResponse,
    responses={204: {"description": "No update available"}},
)
async def general_update(
    platform: str,
    version: str,
    service: UpdateService = Depends(get_update_service),
    settings: AppSettings = Depends(get_settings),
):
    """
    Resolve the update for a client on the default channel.

    Returns:
        Update URL, name, aggregated notes and publication date, or
        204 when the client is up to date
    """
    return _update_response(service, platform, version, settings.default_channel)


@router.get(
    "/update/{platform}/{version}/{channel}",
    response_model=UpdateResponse,
    responses={204: {"description": "No update available"}},
)
async def general_update_for_channel(
    platform: str,
    version: str,
    channel: str,
    service: UpdateService = Depends(get_update_service),
):
    """
    Resolve the update for a client on a given channel.

    Returns:
        Update URL, name, aggregated notes and publication date, or
        204 when the client is up to date
    """
    return _update_response(service, platform, version, channel)


# ============================================================================
# Release Notes Endpoints
# ============================================================================


JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain"


def _accept_quality(accept: str, media_type: str) -> float:
    """
    Quality the Accept header gives a media type.

    The most specific matching range wins (type/subtype, then type/*,
    then */*); a range without q= has quality 1.

    Returns:
        Quality between 0 and 1; 0 when no range matches
    """
    main_type = media_type.split("/", 1)[0]
    best_specificity = -1
    quality = 0.0

    for media_range in accept.split(","):
        parts = [p.strip() for p in media_range.split(";")]
        range_type = parts[0].lower()
        if range_type == media_type:
            specificity = 2
        elif range_type == f"{main_type}/*":
            specificity = 1
        elif range_type == "*/*":
            specificity = 0
        else:
            continue

        range_quality = 1.0
        for param in parts[1:]:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    range_quality = float(value)
                except ValueError:
                    range_quality = 0.0

        if specificity > best_specificity:
            best_specificity = specificity
            quality = range_quality

    return quality


def prefers_json(accept: Optional[str]) -> bool:
    """
    Decide whether release notes are sent as JSON.

    JSON is the default representation: it is chosen when the header is
    missing or when JSON is accepted at least as strongly as plain text.
    """
    if not accept or not accept.strip():
        return True
    json_quality = _accept_quality(accept, JSON_MEDIA_TYPE)
    return json_quality > 0 and json_quality >= _accept_quality(accept, TEXT_MEDIA_TYPE)


def _release_notes_response(
    request: Request,
    service: UpdateService,
    version: Optional[str],
    channel: str,
):
    try:
        record = service.get_release_notes(version, channel)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    if prefers_json(request.headers.get("accept")):
        return ReleaseNotesResponse.from_record(record)
    return PlainTextResponse(record.notes or "")


@router.get("/notes", responses={200: {"model": ReleaseNotesResponse}})
async def latest_release_notes(
    request: Request,
    channel: Optional[str] = Query(None, description="Release channel"),
    service: UpdateService = Depends(get_update_service),
    settings: AppSettings = Depends(get_settings),
):
    """
    Get the release notes of the most recent version of a channel.

    JSON ({"notes", "pub_date"}) unless the Accept header prefers
    text/plain, in which case the raw notes text is sent.

    Raises:
        404: Channel has no versions
    """
    return _release_notes_response(request, service, None, channel or settings.default_channel)


@router.get("/notes/{version}", responses={200: {"model": ReleaseNotesResponse}})
async def release_notes(
    version: str,
    request: Request,
    service: UpdateService = Depends(get_update_service),
    settings: AppSettings = Depends(get_settings),
):
    """
    Get the release notes of a version.

    JSON ({"notes", "pub_date"}) unless the Accept header prefers
    text/plain, in which case the raw notes text is sent.

    Raises:
        404: Version not found
    """
    return _release_notes_response(request, service, version, settings.default_channel)
