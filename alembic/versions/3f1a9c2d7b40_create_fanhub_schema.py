"""create_fanhub_schema

Revision ID: 3f1a9c2d7b40
Revises:
Create Date: 2026-10-19 10:12:44.518302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('user_id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('profile_image_url', sa.String(length=500), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='user'),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_banned', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('ban_reason', sa.String(length=500), nullable=True),
        sa.Column('banned_at', sa.DateTime(), nullable=True),
        sa.Column('banned_by', sa.Integer(), nullable=True),
        sa.Column('age_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('age_verified_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('user_id'),
        sa.ForeignKeyConstraint(['banned_by'], ['users.user_id'], name='fk_users_banned_by', onupdate='CASCADE', ondelete='SET NULL'),
    )
    op.create_index('uq_users_email', 'users', ['email'], unique=True)
    op.create_index('uq_users_username', 'users', ['username'], unique=True)
    op.create_index('idx_users_role', 'users', ['role'])

    op.create_table(
        'fanworks',
        sa.Column('fanwork_id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('rating', sa.String(length=20), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('file_url', sa.String(length=500), nullable=True),
        sa.Column('word_count', sa.Integer(), nullable=True),
        sa.Column('chapter_count', sa.Integer(), nullable=True),
        sa.Column('is_complete', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('ao3_work_id', sa.String(length=50), nullable=True),
        sa.Column('ao3_url', sa.String(length=500), nullable=True),
        sa.Column('original_author', sa.String(length=255), nullable=True),
        sa.Column('imported_at', sa.DateTime(), nullable=True),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('is_hidden', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('moderation_reason', sa.String(length=500), nullable=True),
        sa.Column('moderated_at', sa.DateTime(), nullable=True),
        sa.Column('moderated_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('fanwork_id'),
        sa.ForeignKeyConstraint(['author_id'], ['users.user_id'], onupdate='CASCADE', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['moderated_by'], ['users.user_id'], onupdate='CASCADE', ondelete='SET NULL'),
    )
    op.create_index('fk_fanworks_author_id', 'fanworks', ['author_id'])
    op.create_index('idx_fanworks_created_at', 'fanworks', ['created_at'])
    op.create_index('idx_fanworks_type_rating', 'fanworks', ['type', 'rating'])
    op.create_index('idx_fanworks_is_hidden', 'fanworks', ['is_hidden'])

    op.create_table(
        'tags',
        sa.Column('tag_id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('tag_id'),
    )
    op.create_index('uq_tags_name', 'tags', ['name'], unique=True)

    op.create_table(
        'fanwork_tags',
        sa.Column('fanwork_id', sa.Integer(), nullable=False),
        sa.Column('tag_id', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('fanwork_id', 'tag_id'),
        sa.ForeignKeyConstraint(['fanwork_id'], ['fanworks.fanwork_id'], onupdate='CASCADE', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.tag_id'], onupdate='CASCADE', ondelete='CASCADE'),
    )
    op.create_index('fk_fanwork_tags_tag_id', 'fanwork_tags', ['tag_id'])

    # Likes and bookmarks: the composite primary key is the uniqueness invariant
    for table in ('likes', 'bookmarks'):
        op.create_table(
            table,
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('fanwork_id', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('user_id', 'fanwork_id'),
            sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], onupdate='CASCADE', ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['fanwork_id'], ['fanworks.fanwork_id'], onupdate='CASCADE', ondelete='CASCADE'),
        )
        op.create_index(f'fk_{table}_fanwork_id', table, ['fanwork_id'])

    op.create_table(
        'comments',
        sa.Column('comment_id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('fanwork_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('comment_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], onupdate='CASCADE', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['fanwork_id'], ['fanworks.fanwork_id'], onupdate='CASCADE', ondelete='CASCADE'),
    )
    op.create_index('fk_comments_fanwork_id', 'comments', ['fanwork_id'])
    op.create_index('fk_comments_user_id', 'comments', ['user_id'])

    op.create_table(
        'reports',
        sa.Column('report_id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('reporter_id', sa.Integer(), nullable=False),
        sa.Column('fanwork_id', sa.Integer(), nullable=True),
        sa.Column('comment_id', sa.Integer(), nullable=True),
        sa.Column('reported_user_id', sa.Integer(), nullable=True),
        sa.Column('reason', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('reviewed_by', sa.Integer(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('moderation_action', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('report_id'),
        sa.ForeignKeyConstraint(['reporter_id'], ['users.user_id'], onupdate='CASCADE', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['fanwork_id'], ['fanworks.fanwork_id'], onupdate='CASCADE', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.comment_id'], onupdate='CASCADE', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reported_user_id'], ['users.user_id'], onupdate='CASCADE', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reviewed_by'], ['users.user_id'], onupdate='CASCADE', ondelete='SET NULL'),
    )
    op.create_index('fk_reports_reporter_id', 'reports', ['reporter_id'])
    op.create_index('fk_reports_fanwork_id', 'reports', ['fanwork_id'])
    op.create_index('fk_reports_comment_id', 'reports', ['comment_id'])
    op.create_index('fk_reports_reported_user_id', 'reports', ['reported_user_id'])
    op.create_index('idx_reports_status', 'reports', ['status'])

    op.create_table(
        'moderation_actions',
        sa.Column('action_id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('actor_id', sa.Integer(), nullable=True),
        sa.Column('action_type', sa.String(length=50), nullable=False),
        sa.Column('fanwork_id', sa.Integer(), nullable=True),
        sa.Column('comment_id', sa.Integer(), nullable=True),
        sa.Column('target_user_id', sa.Integer(), nullable=True),
        sa.Column('report_id', sa.Integer(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('action_id'),
        sa.ForeignKeyConstraint(['actor_id'], ['users.user_id'], onupdate='CASCADE', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['fanwork_id'], ['fanworks.fanwork_id'], onupdate='CASCADE', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.comment_id'], onupdate='CASCADE', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['target_user_id'], ['users.user_id'], onupdate='CASCADE', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['report_id'], ['reports.report_id'], onupdate='CASCADE', ondelete='SET NULL'),
    )
    op.create_index('fk_moderation_actions_actor_id', 'moderation_actions', ['actor_id'])
    op.create_index('idx_moderation_actions_action_type', 'moderation_actions', ['action_type'])
    op.create_index('idx_moderation_actions_created_at', 'moderation_actions', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('moderation_actions')
    op.drop_table('reports')
    op.drop_table('comments')
    op.drop_table('bookmarks')
    op.drop_table('likes')
    op.drop_table('fanwork_tags')
    op.drop_table('tags')
    op.drop_table('fanworks')
    op.drop_table('users')
