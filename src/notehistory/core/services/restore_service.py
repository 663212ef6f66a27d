"""Restore service implementation."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ForbiddenError, NotFoundError
from ..logging import get_logger
from ..repositories.note_repository import NoteRepository
from ..repositories.version_repository import VersionRepository
from ..schemas.versions import NoteStateResponse, RestoreResult
from .interfaces import IPermissionGate, IRestoreService
from .permission_gate import WorkspacePermissionGate
from .version_allocator import VersionAllocator

logger = get_logger("versions.restore")


class RestoreService(IRestoreService):
    """Restore service implementation."""

    def __init__(self, session: AsyncSession, permission_gate: Optional[IPermissionGate] = None):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.version_repo = VersionRepository(session)
        self.allocator = VersionAllocator(session, self.version_repo)
        self.permission_gate = permission_gate or WorkspacePermissionGate(session)

    async def restore_version(self, note_id: UUID, version_id: UUID, user_id: UUID) -> RestoreResult:
        """Restore note to a previous version.

        History is never rewritten. In one transaction we:
        - snapshot the current state (the undo version)
        - copy the target version onto the live note
        - append a version recording the restored state

        A target without collaborative state clears the live state, and the
        editor rebuilds its document from the restored content.
        """
        log_extra = {"note_id": str(note_id), "version_id": str(version_id), "user_id": str(user_id)}

        note = await self.note_repo.get_active(note_id)
        if not note:
            raise NotFoundError(f"Note with ID '{note_id}' not found")

        if not await self.permission_gate.can_edit_note(user_id, note):
            logger.warning("Unauthorized version restore attempt", extra=log_extra)
            raise ForbiddenError("You do not have permission to edit this note")

        target = await self.version_repo.get_by_id(version_id)
        if not target or target.note_id != note_id:
            raise NotFoundError(f"Version with ID '{version_id}' not found for this note")

        restored_from = target.version
        title, content, state = target.title, target.content, target.collaborative_state

        try:
            locked = await self.note_repo.lock_for_update(note_id)
            if not locked:
                raise NotFoundError(f"Note with ID '{note_id}' not found")

            undo = await self.allocator.append(
                note_id=note_id,
                created_by_id=user_id,
                title=locked.title,
                content=locked.content,
                collaborative_state=locked.collaborative_state,
            )
            undo_id, undo_number = undo.id, undo.version

            await self.note_repo.apply_state(locked, title, content, state)

            # the note row is locked, nobody else can take undo+1
            await self.version_repo.insert_version({
                "note_id": note_id,
                "version": undo_number + 1,
                "title": title,
                "content": content,
                "collaborative_state": state,
                "created_by_id": user_id,
            })

            note_state = NoteStateResponse.model_validate(locked)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if state is None:
            logger.info(
                "Restored version has no collaborative state, content only",
                extra={**log_extra, "version": restored_from},
            )
        logger.info(
            "Version restored",
            extra={
                **log_extra,
                "restored_from_version": restored_from,
                "undo_version_id": str(undo_id),
                "version": undo_number + 1,
            },
        )

        return RestoreResult(
            note=note_state,
            restored_from_version=restored_from,
            undo_version_id=undo_id,
        )
