"""create community tables

Revision ID: 3f8e2a1b7c90
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f8e2a1b7c90'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def moderation_columns():
    return [
        sa.Column('approved', sa.Boolean(), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('moderated_at', sa.DateTime(), nullable=True),
        sa.Column('moderation_reason', sa.String(length=255), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    ]


def author_columns(required_id: bool = True):
    return [
        sa.Column('author_name', sa.String(length=100), nullable=False),
        sa.Column('author_email', sa.String(length=255), nullable=False),
        sa.Column('author_id', sa.String(length=100), nullable=not required_id),
    ]


def upgrade() -> None:
    op.create_table(
        'forum_posts',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False, comment='URL 标识, 同类型内唯一'),
        sa.Column('content', sa.Text(), nullable=False),
        *author_columns(),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('is_pinned', sa.Boolean(), nullable=True),
        sa.Column('is_locked', sa.Boolean(), nullable=True),
        sa.Column('is_edited', sa.Boolean(), nullable=True),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reply_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_activity_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        *moderation_columns(),
    )
    op.create_index('ix_forum_posts_slug', 'forum_posts', ['slug'], unique=True)
    op.create_index('ix_forum_posts_author_id', 'forum_posts', ['author_id'])
    op.create_index('ix_forum_posts_category', 'forum_posts', ['category'])
    op.create_index('ix_forum_posts_created_at', 'forum_posts', ['created_at'])

    op.create_table(
        'forum_comments',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('content', sa.Text(), nullable=False),
        *author_columns(),
        sa.Column('post_id', sa.String(length=64), sa.ForeignKey('forum_posts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('parent_id', sa.String(length=64), sa.ForeignKey('forum_comments.id', ondelete='CASCADE'), nullable=True),
        sa.Column('is_edited', sa.Boolean(), nullable=True),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        *moderation_columns(),
    )
    op.create_index('ix_forum_comments_post_id', 'forum_comments', ['post_id'])
    op.create_index('ix_forum_comments_parent_id', 'forum_comments', ['parent_id'])
    op.create_index('ix_forum_comments_author_id', 'forum_comments', ['author_id'])
    op.create_index('ix_forum_comments_created_at', 'forum_comments', ['created_at'])

    op.create_table(
        'forum_replies',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('content', sa.Text(), nullable=False),
        *author_columns(),
        sa.Column('post_id', sa.String(length=64), sa.ForeignKey('forum_posts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('is_edited', sa.Boolean(), nullable=True),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        *moderation_columns(),
    )
    op.create_index('ix_forum_replies_post_id', 'forum_replies', ['post_id'])
    op.create_index('ix_forum_replies_author_id', 'forum_replies', ['author_id'])
    op.create_index('ix_forum_replies_created_at', 'forum_replies', ['created_at'])

    op.create_table(
        'recipes',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('average_rating', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_ratings', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_recipes_slug', 'recipes', ['slug'], unique=True)

    op.create_table(
        'blog_posts',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_blog_posts_slug', 'blog_posts', ['slug'], unique=True)

    op.create_table(
        'recipe_comments',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('recipe_id', sa.String(length=64), sa.ForeignKey('recipes.id', ondelete='CASCADE'), nullable=False),
        *author_columns(required_id=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=True, comment='1-5'),
        *moderation_columns(),
    )
    op.create_index('ix_recipe_comments_recipe_id', 'recipe_comments', ['recipe_id'])
    op.create_index('ix_recipe_comments_created_at', 'recipe_comments', ['created_at'])

    op.create_table(
        'blog_comments',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('blog_post_id', sa.String(length=64), sa.ForeignKey('blog_posts.id', ondelete='CASCADE'), nullable=False),
        *author_columns(required_id=False),
        sa.Column('content', sa.Text(), nullable=False),
        *moderation_columns(),
    )
    op.create_index('ix_blog_comments_blog_post_id', 'blog_comments', ['blog_post_id'])
    op.create_index('ix_blog_comments_created_at', 'blog_comments', ['created_at'])


def downgrade() -> None:
    op.drop_table('blog_comments')
    op.drop_table('recipe_comments')
    op.drop_table('blog_posts')
    op.drop_table('recipes')
    op.drop_table('forum_replies')
    op.drop_table('forum_comments')
    op.drop_table('forum_posts')
