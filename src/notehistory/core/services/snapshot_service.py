"""Snapshot service implementation.

Snapshots are taken while a note is being edited (interval timer), when the
editor closes (tab hidden, navigation, beacon on unload) and on explicit
request. The first two go through change detection so an idle editor does
not flood the history.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ForbiddenError, NotFoundError
from ..logging import get_logger
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..repositories.version_repository import VersionRepository
from ..schemas.versions import SnapshotReason, SnapshotResult
from .interfaces import IPermissionGate, ISnapshotService
from .permission_gate import WorkspacePermissionGate
from .version_allocator import VersionAllocator

logger = get_logger("versions.snapshot")


class SnapshotService(ISnapshotService):
    """Snapshot service implementation."""

    def __init__(self, session: AsyncSession, permission_gate: Optional[IPermissionGate] = None):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.version_repo = VersionRepository(session)
        self.allocator = VersionAllocator(session, self.version_repo)
        self.permission_gate = permission_gate or WorkspacePermissionGate(session)

    async def create_snapshot_if_changed(self, note_id: UUID, user_id: UUID) -> SnapshotResult:
        """Append a version when title or content moved since the latest one.

        Failures are reported through ``reason`` instead of raised: callers are
        timers and unload beacons that have nobody to report an error to.
        """
        log_extra = {"note_id": str(note_id), "user_id": str(user_id)}
        try:
            note = await self._load_for_snapshot(note_id, user_id)

            latest = await self.version_repo.get_latest(note_id)
            if latest is not None and latest.matches(note.title, note.content):
                logger.debug(
                    "Snapshot skipped: no changes since last version",
                    extra={**log_extra, "version": latest.version},
                )
                return SnapshotResult.skipped(SnapshotReason.NO_CHANGES)

            return await self._append(note, user_id, "Snapshot created")
        except NotFoundError:
            logger.warning("Snapshot skipped: note not found", extra=log_extra)
            return SnapshotResult.skipped(SnapshotReason.NOTE_NOT_FOUND)
        except ForbiddenError:
            logger.warning("Snapshot forbidden: user lacks permission", extra=log_extra)
            return SnapshotResult.skipped(SnapshotReason.FORBIDDEN)
        except Exception:
            logger.exception("Failed to create snapshot", extra=log_extra)
            await self.session.rollback()
            return SnapshotResult.skipped(SnapshotReason.ERROR)

    async def create_interval_snapshot(self, note_id: UUID, user_id: UUID) -> SnapshotResult:
        """Periodic snapshot while the note is open."""
        logger.debug(
            "Interval snapshot requested", extra={"note_id": str(note_id), "user_id": str(user_id)}
        )
        return await self.create_snapshot_if_changed(note_id, user_id)

    async def create_close_snapshot(self, note_id: UUID, user_id: UUID) -> SnapshotResult:
        """Snapshot when the editor goes away."""
        logger.debug(
            "Close snapshot requested", extra={"note_id": str(note_id), "user_id": str(user_id)}
        )
        return await self.create_snapshot_if_changed(note_id, user_id)

    async def create_forced_snapshot(self, note_id: UUID, user_id: UUID) -> SnapshotResult:
        """Append a version even if nothing changed.

        Raises NotFoundError, ForbiddenError or the storage error.
        """
        try:
            note = await self._load_for_snapshot(note_id, user_id)
            return await self._append(note, user_id, "Forced snapshot created")
        except Exception:
            await self.session.rollback()
            raise

    async def _load_for_snapshot(self, note_id: UUID, user_id: UUID) -> Note:
        note = await self.note_repo.get_active(note_id)
        if not note:
            raise NotFoundError("Note not found")
        if not await self.permission_gate.can_access_note(user_id, note):
            raise ForbiddenError("You do not have access to this note")
        return note

    async def _append(self, note: Note, user_id: UUID, message: str) -> SnapshotResult:
        version = await self.allocator.append(
            note_id=note.id,
            created_by_id=user_id,
            title=note.title,
            content=note.content,
            collaborative_state=note.collaborative_state,
        )
        note_id, version_id, number = note.id, version.id, version.version
        await self.session.commit()

        logger.info(
            message,
            extra={
                "note_id": str(note_id),
                "user_id": str(user_id),
                "version_id": str(version_id),
                "version": number,
            },
        )
        return SnapshotResult(
            created=True, reason=SnapshotReason.CREATED, version_id=version_id, version=number
        )
