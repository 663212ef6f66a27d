"""Capability checks for notes.

A note is either personal (only its owner may see or change it) or lives in a
workspace, where the member's role decides. ``note_scope`` turns a note into
one of the two scopes and the gate dispatches on it.
"""

from dataclasses import dataclass
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..logging import get_logger
from ..models.note import Note
from ..models.workspace import EDIT_ROLES
from ..repositories.workspace_repository import WorkspaceRepository
from .interfaces import IPermissionGate

logger = get_logger("permissions")


@dataclass(frozen=True)
class PersonalScope:
    owner_id: UUID


@dataclass(frozen=True)
class WorkspaceScope:
    workspace_id: UUID
    folder_id: Optional[UUID] = None


NoteScope = Union[PersonalScope, WorkspaceScope]


def note_scope(note: Note) -> NoteScope:
    """Classify a note by where its permissions come from."""
    if note.workspace_id is None:
        return PersonalScope(owner_id=note.owner_id)
    return WorkspaceScope(workspace_id=note.workspace_id, folder_id=note.folder_id)


class WorkspacePermissionGate(IPermissionGate):
    """Default gate: owner for personal notes, membership role for workspace notes.

    Folder level overrides are not applied, a workspace role covers every folder.
    ``WorkspaceScope.folder_id`` is carried so a folder-aware gate can be passed
    to the services instead.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.workspace_repo = WorkspaceRepository(session)

    async def can_access_note(self, user_id: UUID, note: Note) -> bool:
        scope = note_scope(note)
        if isinstance(scope, PersonalScope):
            return scope.owner_id == user_id

        role = await self.workspace_repo.get_user_role(scope.workspace_id, user_id)
        return role is not None

    async def can_edit_note(self, user_id: UUID, note: Note) -> bool:
        scope = note_scope(note)
        if isinstance(scope, PersonalScope):
            return scope.owner_id == user_id

        role = await self.workspace_repo.get_user_role(scope.workspace_id, user_id)
        allowed = role in EDIT_ROLES
        if role is not None and not allowed:
            logger.debug(
                "Workspace role cannot edit",
                extra={"note_id": str(note.id), "user_id": str(user_id), "role": role.value},
            )
        return allowed
