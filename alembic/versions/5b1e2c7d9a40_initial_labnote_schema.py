"""Initial LabNote schema: users, projects, entries, versions, templates

Revision ID: 5b1e2c7d9a40
Revises:
Create Date: 2026-10-19 10:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5b1e2c7d9a40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('provider', sa.String(length=50), nullable=True),
        sa.Column('picture', sa.String(length=1000), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('length(username) <= 255', name='ck_users_username_len'),
        sa.CheckConstraint('email IS NULL OR length(email) <= 255', name='ck_users_email_len'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('idx_users_username', 'users', ['username'])
    op.create_index('idx_users_email', 'users', ['email'])

    op.create_table(
        'projects',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('length(name) <= 255', name='ck_projects_name_len'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_projects_owner_id', 'projects', ['owner_id'])

    op.create_table(
        'project_collaborators',
        sa.Column('project_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('project_id', 'user_id'),
    )

    op.create_table(
        'entries',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('researcher', sa.String(length=255), nullable=True),
        sa.Column('tags', postgresql.ARRAY(sa.String(length=100)), nullable=False),
        sa.Column('attached_file_path', sa.String(length=1000), nullable=True),
        sa.Column('project_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('author_id', postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('length(title) <= 255', name='ck_entries_title_len'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_entries_project_id', 'entries', ['project_id'])
    op.create_index('idx_entries_author_id', 'entries', ['author_id'])
    op.create_index('idx_entries_updated_at', 'entries', ['updated_at'])

    op.create_table(
        'entry_versions',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('entry_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('researcher', sa.String(length=255), nullable=True),
        sa.Column('tags', postgresql.ARRAY(sa.String(length=100)), nullable=False),
        sa.Column('version_timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.Column('modified_by_id', postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['entry_id'], ['entries.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['modified_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_entry_versions_entry_id', 'entry_versions', ['entry_id'])
    op.create_index(
        'idx_entry_versions_timestamp', 'entry_versions', ['entry_id', 'version_timestamp']
    )

    op.create_table(
        'templates',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('length(name) <= 255', name='ck_templates_name_len'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_templates_owner_id', 'templates', ['owner_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_templates_owner_id', table_name='templates')
    op.drop_table('templates')
    op.drop_index('idx_entry_versions_timestamp', table_name='entry_versions')
    op.drop_index('idx_entry_versions_entry_id', table_name='entry_versions')
    op.drop_table('entry_versions')
    op.drop_index('idx_entries_updated_at', table_name='entries')
    op.drop_index('idx_entries_author_id', table_name='entries')
    op.drop_index('idx_entries_project_id', table_name='entries')
    op.drop_table('entries')
    op.drop_table('project_collaborators')
    op.drop_index('idx_projects_owner_id', table_name='projects')
    op.drop_table('projects')
    op.drop_index('idx_users_email', table_name='users')
    op.drop_index('idx_users_username', table_name='users')
    op.drop_table('users')
