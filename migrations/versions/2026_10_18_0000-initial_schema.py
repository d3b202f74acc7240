"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create initial database schema:
    - short_links table: short id to long URL mappings with click_count
    - visit_records table: one row per recorded redirect
    """
    op.create_table(
        'short_links',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('owner_id', sa.String(length=255), nullable=False),
        sa.Column('long_url', sa.Text(), nullable=False),
        sa.Column('short_id', sa.String(length=32), nullable=False),
        sa.Column('click_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    # The allocator depends on this index rejecting duplicate short ids
    op.create_index('ix_short_links_short_id', 'short_links', ['short_id'], unique=True)
    op.create_index('ix_short_links_owner_id', 'short_links', ['owner_id'])
    op.create_index('ix_short_links_created_at', 'short_links', ['created_at'])

    op.create_table(
        'visit_records',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('short_link_id', sa.Integer(), nullable=False),
        sa.Column('visited_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('referrer', sa.Text(), nullable=False, server_default='Direct'),
        sa.Column('user_agent', sa.Text(), nullable=False, server_default=''),
        sa.Column('browser', sa.String(length=32), nullable=False),
        sa.Column('os', sa.String(length=32), nullable=False),
        sa.Column('device', sa.String(length=16), nullable=False),
        sa.ForeignKeyConstraint(
            ['short_link_id'],
            ['short_links.id'],
            name='fk_visit_records_short_link_id',
            ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_visit_records_short_link_id', 'visit_records', ['short_link_id'])
    op.create_index('ix_visit_records_visited_at', 'visit_records', ['visited_at'])


def downgrade() -> None:
    op.drop_index('ix_visit_records_visited_at', table_name='visit_records')
    op.drop_index('ix_visit_records_short_link_id', table_name='visit_records')
    op.drop_table('visit_records')

    op.drop_index('ix_short_links_created_at', table_name='short_links')
    op.drop_index('ix_short_links_owner_id', table_name='short_links')
    op.drop_index('ix_short_links_short_id', table_name='short_links')
    op.drop_table('short_links')
