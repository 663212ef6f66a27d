"""
Database models for the note history engine.

This package contains SQLAlchemy ORM models that define the database schema
for live notes and their immutable version history. All models are designed
for async operations through the repository layer.

Models included:
    - User: authors of notes and versions
    - Workspace / WorkspaceMember: shared containers and member roles
    - Note: live note state, including the opaque collaborative state
    - NoteVersion: immutable, per-note numbered snapshots
"""

from .base import BaseModel
from .note import Note
from .note_version import ImmutableVersionError, NoteVersion
from .user import User
from .workspace import EDIT_ROLES, Workspace, WorkspaceMember, WorkspaceRole

__all__ = [
    "BaseModel",
    "User",
    "Workspace",
    "WorkspaceMember",
    "WorkspaceRole",
    "EDIT_ROLES",
    "Note",
    "NoteVersion",
    "ImmutableVersionError",
]
