"""Create blog console tables

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-16 10:12:41.205311

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'source_data',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('category_large', sa.String(), nullable=False),
        sa.Column('category_medium', sa.String(), nullable=False),
        sa.Column('category_small', sa.String(), nullable=True),
        sa.Column('core_keyword', sa.String(), nullable=False),
        sa.Column('seo_keywords', sa.JSON(), nullable=False),
        sa.Column('blog_topic', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_source_data_id', 'source_data', ['id'])
    op.create_index('ix_source_data_number', 'source_data', ['number'], unique=True)

    op.create_table(
        'generated_posts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('source_data_id', sa.Integer(), sa.ForeignKey('source_data.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('content_type', sa.String(), nullable=True),
        sa.Column('additional_request', sa.Text(), nullable=True),
        sa.Column('prompt_used', sa.Text(), nullable=True),
        sa.Column('model_used', sa.String(), nullable=False),
        sa.Column('tokens_used', sa.Integer(), nullable=True),
        sa.Column('status', sa.Enum('draft', 'published', 'archived', name='poststatusenum'), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('sub_image_urls', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_generated_posts_id', 'generated_posts', ['id'])
    op.create_index('ix_generated_posts_source_data_id', 'generated_posts', ['source_data_id'])
    op.create_index('ix_generated_posts_created_at', 'generated_posts', ['created_at'])

    op.create_table(
        'prompts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('content_type', sa.String(), nullable=False),
        sa.Column('template', sa.Text(), nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_prompts_id', 'prompts', ['id'])
    op.create_index('ix_prompts_content_type', 'prompts', ['content_type'])

    op.create_table(
        'image_prompts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('key', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('prompt', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('category', 'key', name='uq_image_prompts_category_key'),
    )
    op.create_index('ix_image_prompts_id', 'image_prompts', ['id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('image_prompts')
    op.drop_table('prompts')
    op.drop_table('generated_posts')
    op.drop_table('source_data')
