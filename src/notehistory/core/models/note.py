# Note model - the live, mutable document
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel, utc_now
from .types import GUID, OpaqueBlob

if TYPE_CHECKING:
    from .note_version import NoteVersion
    from .user import User
    from .workspace import Workspace

TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 1_000_000


class Note(BaseModel):
    """Live note state.

    ``collaborative_state`` is the binary document produced by the real-time
    editor. It is stored and handed back untouched, never interpreted here.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    collaborative_state: Mapped[Optional[bytes]] = mapped_column(OpaqueBlob(), nullable=True)

    # no workspace means a personal note
    workspace_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=True
    )
    folder_id: Mapped[Optional[uuid.UUID]] = mapped_column(GUID(), nullable=True)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # soft delete marker
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    owner: Mapped["User"] = relationship("User", lazy="selectin")
    workspace: Mapped[Optional["Workspace"]] = relationship("Workspace")

    versions: Mapped[List["NoteVersion"]] = relationship(
        "NoteVersion",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
        order_by="NoteVersion.version",
        doc="Immutable history, loaded explicitly through VersionRepository",
    )

    __table_args__ = (
        CheckConstraint(f"length(title) <= {TITLE_MAX_LENGTH}", name="ck_notes_title_len"),
        CheckConstraint(
            f"content IS NULL OR length(content) <= {CONTENT_MAX_LENGTH}",
            name="ck_notes_content_len",
        ),
        Index("idx_notes_owner_id", "owner_id"),
        Index("idx_notes_workspace_id", "workspace_id"),
        Index("idx_notes_deleted_at", "deleted_at"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', owner_id={self.owner_id})>"

    @property
    def is_deleted(self) -> bool:
        """Soft-deleted notes are invisible to history operations."""
        return self.deleted_at is not None

    @property
    def is_personal(self) -> bool:
        return self.workspace_id is None

    @property
    def has_collaborative_state(self) -> bool:
        return self.collaborative_state is not None

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        """Check if this note is owned by the specified user."""
        return self.owner_id == user_id
