"""Initial schema: assets and user preferences

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create assets table (partitioned by household_id)
    op.create_table(
        'assets',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('household_id', sa.String(length=255), nullable=False),
        sa.Column('make', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('model', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('serial_number', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('category', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('value', sa.Float(), nullable=False),
        sa.Column('date_purchased', sa.String(length=10), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=False, server_default=''),
        sa.Column('image_urls', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.String(length=32), nullable=False),
        sa.Column('updated_at', sa.String(length=32), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_assets_household_id'), 'assets', ['household_id'], unique=False)

    # Create user_preferences table (user_id is key and partition)
    op.create_table(
        'user_preferences',
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('dark_mode', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('language', sa.String(length=8), nullable=False, server_default='en'),
        sa.Column('updated_at', sa.String(length=32), nullable=False),
        sa.PrimaryKeyConstraint('user_id')
    )


def downgrade() -> None:
    op.drop_table('user_preferences')
    op.drop_index(op.f('ix_assets_household_id'), table_name='assets')
    op.drop_table('assets')
