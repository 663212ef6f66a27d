"""Repository layer for data access."""

from .note_repository import NoteRepository
from .version_repository import VersionRepository
from .workspace_repository import WorkspaceRepository

__all__ = [
    "NoteRepository",
    "VersionRepository",
    "WorkspaceRepository",
]
