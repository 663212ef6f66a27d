"""
Service interfaces for the note history application.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from uuid import UUID

from ..models.note import Note
from ..schemas.common import HealthCheckResponse
from ..schemas.versions import (
    NoteVersionDetail,
    RestoreResult,
    SnapshotResult,
    VersionListResponse,
)


class IPermissionGate(ABC):
    """Capability checks on a note."""

    @abstractmethod
    async def can_access_note(self, user_id: UUID, note: Note) -> bool:
        """Whether the user may view the note and its history."""
        pass

    @abstractmethod
    async def can_edit_note(self, user_id: UUID, note: Note) -> bool:
        """Whether the user may change the note (restore included)."""
        pass


class ISnapshotService(ABC):
    """Snapshot service for appending note history."""

    @abstractmethod
    async def create_snapshot_if_changed(self, note_id: UUID, user_id: UUID) -> SnapshotResult:
        """Append a version unless title and content match the latest one. Never raises."""
        pass

    @abstractmethod
    async def create_forced_snapshot(self, note_id: UUID, user_id: UUID) -> SnapshotResult:
        """Always append a version."""
        pass


class IRestoreService(ABC):
    """Restore service for rolling a note back."""

    @abstractmethod
    async def restore_version(self, note_id: UUID, version_id: UUID, user_id: UUID) -> RestoreResult:
        """Restore note to a previous version, keeping the history append-only."""
        pass


class IVersionService(ABC):
    """Read-only access to note history."""

    @abstractmethod
    async def get_versions_by_note_id(
        self, note_id: UUID, user_id: UUID, page: int = 1, per_page: Optional[int] = None
    ) -> VersionListResponse:
        """List versions newest first."""
        pass

    @abstractmethod
    async def get_version_by_id(self, version_id: UUID, user_id: UUID) -> NoteVersionDetail:
        """Get one version by ID."""
        pass

    @abstractmethod
    async def get_version_by_number(
        self, note_id: UUID, version_number: int, user_id: UUID
    ) -> NoteVersionDetail:
        """Get one version by its number."""
        pass

    @abstractmethod
    async def get_note_version(
        self, note_id: UUID, version_id: UUID, user_id: UUID
    ) -> NoteVersionDetail:
        """Get one version, checking it belongs to the note."""
        pass


class IHealthService(ABC):
    """Health checks."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        pass
