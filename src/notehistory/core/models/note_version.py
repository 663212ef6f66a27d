# Immutable history records
import uuid
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    event,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .note import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH
from .types import GUID, OpaqueBlob

if TYPE_CHECKING:
    from .note import Note
    from .user import User


class ImmutableVersionError(RuntimeError):
    """Raised when something tries to change a persisted version."""


class NoteVersion(BaseModel):
    """Point-in-time copy of a note, numbered per note starting at 1."""

    __tablename__ = "note_versions"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    collaborative_state: Mapped[Optional[bytes]] = mapped_column(OpaqueBlob(), nullable=True)

    created_by_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    note: Mapped["Note"] = relationship("Note", back_populates="versions")
    created_by: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        # the allocator relies on this to detect concurrent writers
        UniqueConstraint("note_id", "version", name="uq_note_versions_note_version"),
        CheckConstraint("version >= 1", name="ck_note_versions_version_positive"),
        CheckConstraint(f"length(title) <= {TITLE_MAX_LENGTH}", name="ck_note_versions_title_len"),
        CheckConstraint(
            f"content IS NULL OR length(content) <= {CONTENT_MAX_LENGTH}",
            name="ck_note_versions_content_len",
        ),
        Index("idx_note_versions_note_id", "note_id"),
        Index("idx_note_versions_created_by", "created_by_id"),
    )

    def __repr__(self) -> str:
        return f"<NoteVersion(note_id={self.note_id}, version={self.version})>"

    @property
    def has_collaborative_state(self) -> bool:
        return self.collaborative_state is not None

    def matches(self, title: str, content: Optional[str]) -> bool:
        """Same title and content. Binary state is ignored on purpose."""
        return self.title == title and self.content == content


@event.listens_for(NoteVersion, "before_update", propagate=True)
def _reject_version_update(mapper, connection, target: NoteVersion):
    raise ImmutableVersionError(
        f"Version {target.version} of note {target.note_id} is immutable"
    )
