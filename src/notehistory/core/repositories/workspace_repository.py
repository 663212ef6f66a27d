"""Workspace membership lookups for capability checks."""

from typing import Optional
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.workspace import Workspace, WorkspaceMember, WorkspaceRole


class WorkspaceRepository:
    """Repository for workspace database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_role(self, workspace_id: UUID, user_id: UUID) -> Optional[WorkspaceRole]:
        """Role of the user in the workspace, None when not a member."""
        stmt = (
            select(Workspace.owner_id, WorkspaceMember.role)
            .outerjoin(
                WorkspaceMember,
                and_(
                    WorkspaceMember.workspace_id == Workspace.id,
                    WorkspaceMember.user_id == user_id,
                ),
            )
            .where(Workspace.id == workspace_id)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        if row is None:
            return None

        owner_id, role = row
        if owner_id == user_id:
            return WorkspaceRole.OWNER
        return WorkspaceRole(role) if role else None
