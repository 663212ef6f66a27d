"""Version history API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..core.schemas.common import ErrorResponse
from ..core.schemas.versions import (
    NoteVersionDetail,
    RestoreRequest,
    RestoreResult,
    SnapshotRequest,
    SnapshotResult,
    VersionListResponse,
)
from ..core.services import RestoreService, SnapshotService, VersionService
from ..database import get_db_session
from ..middleware.auth import get_beacon_user_id, get_current_user_id

router = APIRouter(prefix="/notes", tags=["versions"])
settings = get_settings()


@router.post(
    "/snapshot",
    response_model=SnapshotResult,
    responses={400: {"model": ErrorResponse}},
)
async def close_snapshot(
    request: Request,
    current_user_id: UUID = Depends(get_beacon_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Snapshot a note when its editor closes.

    Called through ``navigator.sendBeacon`` which posts ``text/plain`` and
    carries no Authorization header, so the body is parsed by hand and the
    token is read from the auth cookie. Snapshot failures still answer 200.
    """
    try:
        body = SnapshotRequest.model_validate_json(await request.body())
    except ValidationError as e:
        error = ErrorResponse(
            error="ValidationError",
            message="Invalid request body",
            details={
                "errors": e.errors(include_url=False, include_context=False, include_input=False)
            },
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=error.model_dump(mode="json")
        )

    snapshot_service = SnapshotService(session)
    return await snapshot_service.create_close_snapshot(body.note_id, current_user_id)


@router.get("/{note_id}/versions", response_model=VersionListResponse)
async def list_versions(
    note_id: UUID,
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1, le=settings.max_page_size),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """List a note's versions, newest first."""
    version_service = VersionService(session)
    return await version_service.get_versions_by_note_id(
        note_id, current_user_id, page=page, per_page=per_page
    )


@router.post(
    "/{note_id}/versions/snapshot",
    response_model=SnapshotResult,
    status_code=status.HTTP_201_CREATED,
)
async def create_snapshot(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Snapshot the note now, even if nothing changed."""
    snapshot_service = SnapshotService(session)
    return await snapshot_service.create_forced_snapshot(note_id, current_user_id)


@router.post("/{note_id}/versions/restore", response_model=RestoreResult)
async def restore_version(
    note_id: UUID,
    request: RestoreRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Restore the note to one of its versions."""
    restore_service = RestoreService(session)
    return await restore_service.restore_version(note_id, request.version_id, current_user_id)


@router.get("/{note_id}/versions/number/{version_number}", response_model=NoteVersionDetail)
async def get_version_by_number(
    note_id: UUID,
    version_number: int,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a version by its number."""
    version_service = VersionService(session)
    return await version_service.get_version_by_number(note_id, version_number, current_user_id)


@router.get("/{note_id}/versions/{version_id}", response_model=NoteVersionDetail)
async def get_version(
    note_id: UUID,
    version_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a version of the note, content and collaborative state included."""
    version_service = VersionService(session)
    return await version_service.get_note_version(note_id, version_id, current_user_id)
