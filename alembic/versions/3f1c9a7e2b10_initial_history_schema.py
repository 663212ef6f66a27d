"""Initial schema for notes and their version history

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2026-10-18 09:12:04.118420

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid() -> sa.types.TypeEngine:
    return postgresql.UUID(as_uuid=True).with_variant(sa.String(36), 'sqlite')


def _blob() -> sa.types.TypeEngine:
    return sa.LargeBinary().with_variant(postgresql.BYTEA(), 'postgresql')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('length(username) <= 50', name='ck_users_username_len'),
        sa.CheckConstraint('full_name IS NULL OR length(full_name) <= 100', name='ck_users_full_name_len'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )
    op.create_index('idx_users_username', 'users', ['username'], unique=False)

    op.create_table(
        'workspaces',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('owner_id', _uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('length(name) <= 100', name='ck_workspaces_name_len'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_workspaces_owner_id', 'workspaces', ['owner_id'], unique=False)

    op.create_table(
        'workspace_members',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('workspace_id', _uuid(), nullable=False),
        sa.Column('user_id', _uuid(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("role IN ('admin', 'editor', 'viewer')", name='ck_workspace_members_role'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('workspace_id', 'user_id', name='uq_workspace_members_user'),
    )
    op.create_index('idx_workspace_members_user_id', 'workspace_members', ['user_id'], unique=False)

    op.create_table(
        'notes',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('collaborative_state', _blob(), nullable=True),
        sa.Column('workspace_id', _uuid(), nullable=True),
        sa.Column('folder_id', _uuid(), nullable=True),
        sa.Column('owner_id', _uuid(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('length(title) <= 255', name='ck_notes_title_len'),
        sa.CheckConstraint('content IS NULL OR length(content) <= 1000000', name='ck_notes_content_len'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_notes_owner_id', 'notes', ['owner_id'], unique=False)
    op.create_index('idx_notes_workspace_id', 'notes', ['workspace_id'], unique=False)
    op.create_index('idx_notes_deleted_at', 'notes', ['deleted_at'], unique=False)

    op.create_table(
        'note_versions',
        sa.Column('id', _uuid(), nullable=False),
        sa.Column('note_id', _uuid(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('collaborative_state', _blob(), nullable=True),
        sa.Column('created_by_id', _uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('version >= 1', name='ck_note_versions_version_positive'),
        sa.CheckConstraint('length(title) <= 255', name='ck_note_versions_title_len'),
        sa.CheckConstraint('content IS NULL OR length(content) <= 1000000', name='ck_note_versions_content_len'),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['note_id'], ['notes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('note_id', 'version', name='uq_note_versions_note_version'),
    )
    op.create_index('idx_note_versions_note_id', 'note_versions', ['note_id'], unique=False)
    op.create_index('idx_note_versions_created_by', 'note_versions', ['created_by_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_note_versions_created_by', table_name='note_versions')
    op.drop_index('idx_note_versions_note_id', table_name='note_versions')
    op.drop_table('note_versions')
    op.drop_index('idx_notes_deleted_at', table_name='notes')
    op.drop_index('idx_notes_workspace_id', table_name='notes')
    op.drop_index('idx_notes_owner_id', table_name='notes')
    op.drop_table('notes')
    op.drop_index('idx_workspace_members_user_id', table_name='workspace_members')
    op.drop_table('workspace_members')
    op.drop_index('idx_workspaces_owner_id', table_name='workspaces')
    op.drop_table('workspaces')
    op.drop_index('idx_users_username', table_name='users')
    op.drop_table('users')
