"""Version store - append-only access to note history."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import Row, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.note_version import NoteVersion
from ..models.user import User


class VersionRepository:
    """Repository for note version database operations.

    There is deliberately no update or delete here.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_latest_version_number(self, note_id: UUID) -> int:
        """Highest version number for the note, 0 when there is no history."""
        stmt = select(func.max(NoteVersion.version)).where(NoteVersion.note_id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def get_latest(self, note_id: UUID) -> Optional[NoteVersion]:
        """Most recent version of the note."""
        stmt = (
            select(NoteVersion)
            .where(NoteVersion.note_id == note_id)
            .order_by(desc(NoteVersion.version))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_version(self, version_data: dict) -> NoteVersion:
        """Insert one version inside a SAVEPOINT.

        A unique violation only rolls back the savepoint, so the caller can retry
        without losing the enclosing transaction. IntegrityError propagates.
        """
        version = NoteVersion(**version_data)
        async with self.session.begin_nested():
            self.session.add(version)
        return version

    async def get_by_id(self, version_id: UUID) -> Optional[NoteVersion]:
        """Get version by ID with its parent note loaded."""
        stmt = (
            select(NoteVersion)
            .options(selectinload(NoteVersion.note))
            .where(NoteVersion.id == version_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_number(self, note_id: UUID, version_number: int) -> Optional[NoteVersion]:
        """Get a note's version by its number."""
        stmt = select(NoteVersion).where(
            NoteVersion.note_id == note_id, NoteVersion.version == version_number
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_for_note(self, note_id: UUID) -> int:
        stmt = select(func.count(NoteVersion.id)).where(NoteVersion.note_id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def list_for_note(
        self, note_id: UUID, page: int = 1, per_page: int = 20
    ) -> tuple[List[Row], int]:
        """List version summaries newest first with pagination.

        Rows carry the summary columns plus the author's username/full_name;
        content and binary state stay in the DB.
        """
        offset = (page - 1) * per_page

        total_count = await self.count_for_note(note_id)

        stmt = (
            select(
                NoteVersion.id,
                NoteVersion.note_id,
                NoteVersion.version,
                NoteVersion.title,
                NoteVersion.created_at,
                NoteVersion.created_by_id,
                User.username.label("created_by_username"),
                User.full_name.label("created_by_full_name"),
            )
            .outerjoin(User, User.id == NoteVersion.created_by_id)
            .where(NoteVersion.note_id == note_id)
            .order_by(desc(NoteVersion.version))
            .offset(offset)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.all()), total_count
