"""Per-note version numbering without a global lock.

Read the current maximum, insert max+1 and let the unique constraint on
(note_id, version) arbitrate between concurrent writers. The loser retries
with a fresh maximum.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..logging import get_logger
from ..models.note_version import NoteVersion
from ..repositories.version_repository import VersionRepository
from ..schemas.versions import VersionCreate

logger = get_logger("versions.allocator")

UNIQUE_VIOLATION_SQLSTATE = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    """Tell a duplicate version number apart from other integrity failures."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == UNIQUE_VIOLATION_SQLSTATE
    return "unique" in str(orig).lower()


class VersionAllocator:
    """Append versions with optimistic retry on number conflicts.

    Does not commit. Every attempt runs in a savepoint, so the enclosing
    transaction survives a lost race.
    """

    def __init__(
        self,
        session: AsyncSession,
        version_repo: Optional[VersionRepository] = None,
        max_attempts: Optional[int] = None,
    ):
        self.session = session
        self.version_repo = version_repo or VersionRepository(session)
        self.max_attempts = max_attempts or get_settings().version_allocation_attempts

    async def append(
        self,
        note_id: UUID,
        created_by_id: UUID,
        title: str,
        content: Optional[str],
        collaborative_state: Optional[bytes] = None,
    ) -> NoteVersion:
        """Persist a new version numbered after the current latest one."""
        payload = VersionCreate(
            title=title, content=content, collaborative_state=collaborative_state
        )

        attempt = 0
        while True:
            attempt += 1
            latest = await self.version_repo.get_latest_version_number(note_id)
            version_data = {
                "note_id": note_id,
                "version": latest + 1,
                "created_by_id": created_by_id,
                **payload.model_dump(),
            }
            try:
                return await self.version_repo.insert_version(version_data)
            except IntegrityError as exc:
                if not _is_unique_violation(exc):
                    raise
                if attempt >= self.max_attempts:
                    logger.error(
                        "Version allocation failed after retries",
                        extra={
                            "note_id": str(note_id),
                            "version": latest + 1,
                            "attempts": attempt,
                        },
                    )
                    raise
                logger.warning(
                    "Version number already taken, retrying",
                    extra={"note_id": str(note_id), "version": latest + 1, "attempt": attempt},
                )
