"""
Version history schemas.

These schemas define the contracts for snapshots, restores and history
reads. Collaborative state travels as base64 in JSON.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.note import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH
from .common import PaginationResponse


class VersionCreate(BaseModel):
    """Payload appended to a note's history (internal)."""

    title: str = Field(max_length=TITLE_MAX_LENGTH, description="Title at snapshot time")
    content: Optional[str] = Field(
        default=None, max_length=CONTENT_MAX_LENGTH, description="Content at snapshot time"
    )
    collaborative_state: Optional[bytes] = Field(
        default=None, description="Opaque collaborative editor state"
    )


class NoteVersionSummary(BaseModel):
    """Lightweight version for list views (no content, no binary state)."""

    id: uuid.UUID = Field(description="Version unique identifier")
    note_id: uuid.UUID = Field(description="Note this version belongs to")
    version: int = Field(description="Per-note version number")
    title: str = Field(description="Title at snapshot time")
    created_at: datetime = Field(description="Snapshot timestamp")
    created_by_id: uuid.UUID = Field(description="Author of the snapshot")
    created_by_username: Optional[str] = Field(default=None, description="Author username")
    created_by_display_name: Optional[str] = Field(default=None, description="Author display name")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "note_id": "456e7890-e89b-12d3-a456-426614174000",
                "version": 3,
                "title": "Meeting Notes - Q4 Planning",
                "created_at": "2025-09-13T10:30:00Z",
                "created_by_id": "789e0123-e89b-12d3-a456-426614174000",
                "created_by_username": "john_doe",
                "created_by_display_name": "John Doe",
            }
        },
    )


class NoteVersionDetail(BaseModel):
    """Full version including content and binary state."""

    id: uuid.UUID = Field(description="Version unique identifier")
    note_id: uuid.UUID = Field(description="Note this version belongs to")
    version: int = Field(description="Per-note version number")
    title: str = Field(description="Title at snapshot time")
    content: Optional[str] = Field(description="Content at snapshot time")
    collaborative_state: Optional[bytes] = Field(
        description="Opaque collaborative editor state (base64 in JSON)"
    )
    created_at: datetime = Field(description="Snapshot timestamp")
    created_by_id: uuid.UUID = Field(description="Author of the snapshot")

    model_config = ConfigDict(from_attributes=True, ser_json_bytes="base64")


class VersionListResponse(PaginationResponse[NoteVersionSummary]):
    """Paginated version history, newest first."""

    note_id: uuid.UUID = Field(description="Note the history belongs to")


class SnapshotReason(str, Enum):
    """Why a snapshot was or wasn't taken."""

    CREATED = "created"
    NO_CHANGES = "no_changes"
    NOTE_NOT_FOUND = "note_not_found"
    FORBIDDEN = "forbidden"
    ERROR = "error"


class SnapshotResult(BaseModel):
    """Outcome of a snapshot attempt."""

    created: bool = Field(description="Whether a new version was appended")
    reason: SnapshotReason = Field(description="Outcome discriminator")
    version_id: Optional[uuid.UUID] = Field(default=None, description="New version ID")
    version: Optional[int] = Field(default=None, description="New version number")

    @classmethod
    def skipped(cls, reason: SnapshotReason) -> "SnapshotResult":
        return cls(created=False, reason=reason)


class SnapshotRequest(BaseModel):
    """Body of the close/beacon snapshot endpoint."""

    note_id: uuid.UUID = Field(description="Note to snapshot")


class RestoreRequest(BaseModel):
    """Body of the restore endpoint."""

    version_id: uuid.UUID = Field(description="Version to restore the note to")


class NoteStateResponse(BaseModel):
    """Live note projection returned after a restore."""

    id: uuid.UUID
    title: str
    content: Optional[str]
    has_collaborative_state: bool = Field(
        description="False when the restore fell back to content only"
    )
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RestoreResult(BaseModel):
    """Outcome of a restore."""

    note: NoteStateResponse = Field(description="Note after restoration")
    restored_from_version: int = Field(description="Version number that was restored")
    undo_version_id: uuid.UUID = Field(
        description="Snapshot of the pre-restore state, restore it to undo"
    )
