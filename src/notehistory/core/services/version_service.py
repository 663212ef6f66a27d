"""Version history read service."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..exceptions import ForbiddenError, NotFoundError
from ..logging import get_logger
from ..models.note import Note
from ..models.note_version import NoteVersion
from ..repositories.note_repository import NoteRepository
from ..repositories.version_repository import VersionRepository
from ..schemas.common import PaginationResponse
from ..schemas.versions import NoteVersionDetail, NoteVersionSummary, VersionListResponse
from .interfaces import IPermissionGate, IVersionService
from .permission_gate import WorkspacePermissionGate

logger = get_logger("versions.query")


class VersionService(IVersionService):
    """Version service implementation."""

    def __init__(self, session: AsyncSession, permission_gate: Optional[IPermissionGate] = None):
        self.session = session
        self.settings = get_settings()
        self.note_repo = NoteRepository(session)
        self.version_repo = VersionRepository(session)
        self.permission_gate = permission_gate or WorkspacePermissionGate(session)

    async def get_versions_by_note_id(
        self, note_id: UUID, user_id: UUID, page: int = 1, per_page: Optional[int] = None
    ) -> VersionListResponse:
        """List versions newest first, without content or binary state."""
        await self._get_viewable_note(note_id, user_id)

        # Clamp paging to sane bounds
        per_page = per_page or self.settings.default_page_size
        per_page = max(1, min(per_page, self.settings.max_page_size))
        page = max(1, page)

        rows, total = await self.version_repo.list_for_note(note_id, page, per_page)
        items = [
            NoteVersionSummary(
                id=row.id,
                note_id=row.note_id,
                version=row.version,
                title=row.title,
                created_at=row.created_at,
                created_by_id=row.created_by_id,
                created_by_username=row.created_by_username,
                created_by_display_name=row.created_by_full_name or row.created_by_username,
            )
            for row in rows
        ]

        page_data = PaginationResponse[NoteVersionSummary].create(items, total, page, per_page)
        return VersionListResponse(note_id=note_id, **page_data.model_dump())

    async def get_version_by_id(self, version_id: UUID, user_id: UUID) -> NoteVersionDetail:
        """Get one version by ID, enforcing access on its note."""
        version = await self.version_repo.get_by_id(version_id)
        if not version or version.note.is_deleted:
            raise NotFoundError(f"Version with ID '{version_id}' not found")

        await self._check_access(version.note, user_id)
        return self._to_detail(version, user_id)

    async def get_version_by_number(
        self, note_id: UUID, version_number: int, user_id: UUID
    ) -> NoteVersionDetail:
        """Get a note's version by number."""
        await self._get_viewable_note(note_id, user_id)

        version = await self.version_repo.get_by_number(note_id, version_number)
        if not version:
            raise NotFoundError(f"Version {version_number} not found for this note")
        return self._to_detail(version, user_id)

    async def get_note_version(
        self, note_id: UUID, version_id: UUID, user_id: UUID
    ) -> NoteVersionDetail:
        """Get a version by ID only if it belongs to the given note."""
        await self._get_viewable_note(note_id, user_id)

        version = await self.version_repo.get_by_id(version_id)
        if not version or version.note_id != note_id:
            raise NotFoundError(f"Version with ID '{version_id}' not found for this note")
        return self._to_detail(version, user_id)

    async def _get_viewable_note(self, note_id: UUID, user_id: UUID) -> Note:
        note = await self.note_repo.get_active(note_id)
        if not note:
            raise NotFoundError(f"Note with ID '{note_id}' not found")
        await self._check_access(note, user_id)
        return note

    async def _check_access(self, note: Note, user_id: UUID) -> None:
        if not await self.permission_gate.can_access_note(user_id, note):
            logger.warning(
                "Unauthorized version access attempt",
                extra={
                    "note_id": str(note.id),
                    "user_id": str(user_id),
                    "workspace_id": str(note.workspace_id) if note.workspace_id else None,
                },
            )
            raise ForbiddenError("You do not have permission to access this note")

    def _to_detail(self, version: NoteVersion, user_id: UUID) -> NoteVersionDetail:
        logger.info(
            "Note version accessed",
            extra={
                "note_id": str(version.note_id),
                "version": version.version,
                "user_id": str(user_id),
            },
        )
        return NoteVersionDetail.model_validate(version)
