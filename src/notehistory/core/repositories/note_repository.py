"""Note repository for database operations."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import utc_now
from ..models.note import Note


class NoteRepository:
    """Repository for live note reads and writes.

    Methods never commit: the calling service owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: dict) -> Note:
        """Create new note."""
        note = Note(**note_data)
        self.session.add(note)
        await self.session.flush()
        return note

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID, soft-deleted ones included."""
        stmt = select(Note).where(Note.id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID unless soft-deleted."""
        stmt = select(Note).where(Note.id == note_id, Note.deleted_at.is_(None))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def lock_for_update(self, note_id: UUID) -> Optional[Note]:
        """Re-read the note under a row lock for the rest of the transaction.

        populate_existing makes sure we work on the locked row values and not on
        whatever the identity map held from an earlier read.
        """
        stmt = (
            select(Note)
            .where(Note.id == note_id, Note.deleted_at.is_(None))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def apply_state(
        self,
        note: Note,
        title: str,
        content: Optional[str],
        collaborative_state: Optional[bytes],
    ) -> Note:
        """Overwrite the live state (a None state clears it)."""
        note.title = title
        note.content = content
        note.collaborative_state = collaborative_state
        note.updated_at = utc_now()
        await self.session.flush()
        return note
