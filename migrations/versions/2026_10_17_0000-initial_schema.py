"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CHILD_TABLES = ('locations', 'hours', 'services', 'reviews')


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def _business_fk() -> sa.Column:
    return sa.Column(
        'business_id',
        sa.String(length=36),
        sa.ForeignKey('businesses.id', ondelete='CASCADE'),
        nullable=False,
    )


def upgrade() -> None:
    """
    Create initial database schema:
    - businesses table: The directory entries (name is unique)
    - locations, hours, services, reviews: Children of a business, deleted
      with it via ON DELETE CASCADE
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    if 'businesses' not in existing_tables:
        op.create_table(
            'businesses',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('address_line1', sa.String(length=255), nullable=True),
            sa.Column('address_line2', sa.String(length=255), nullable=True),
            sa.Column('city', sa.String(length=255), nullable=True),
            sa.Column('state', sa.String(length=255), nullable=True),
            sa.Column('postal', sa.String(length=32), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_businesses_name', 'businesses', ['name'], unique=True)

    # Foreign keys are declared inline: SQLite cannot add them after table creation
    if 'locations' not in existing_tables:
        op.create_table(
            'locations',
            sa.Column('id', sa.String(length=36), nullable=False),
            _business_fk(),
            sa.Column('name', sa.String(length=255), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('business_id', 'name', name='uq_locations_business_id_name')
        )

    if 'hours' not in existing_tables:
        op.create_table(
            'hours',
            sa.Column('id', sa.String(length=36), nullable=False),
            _business_fk(),
            sa.Column('day_of_week', sa.Integer(), nullable=False),
            sa.Column('open', sa.Integer(), nullable=False),
            sa.Column('close', sa.Integer(), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('business_id', 'day_of_week', name='uq_hours_business_id_day_of_week'),
            sa.CheckConstraint('open < close', name='ck_hours_open_before_close')
        )

    if 'services' not in existing_tables:
        op.create_table(
            'services',
            sa.Column('id', sa.String(length=36), nullable=False),
            _business_fk(),
            sa.Column('name', sa.String(length=255), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('business_id', 'name', name='uq_services_business_id_name')
        )

    if 'reviews' not in existing_tables:
        op.create_table(
            'reviews',
            sa.Column('id', sa.String(length=36), nullable=False),
            _business_fk(),
            sa.Column('rating', sa.Float(), nullable=False),
            sa.Column('comment', sa.Text(), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_reviews_created_at', 'reviews', ['created_at'])

    for table in CHILD_TABLES:
        if table not in existing_tables:
            op.create_index(f'ix_{table}_business_id', table, ['business_id'])


def downgrade() -> None:
    """
    Drop all tables and indexes, children first.
    """
    op.drop_index('ix_reviews_created_at', table_name='reviews')
    for table in CHILD_TABLES:
        op.drop_index(f'ix_{table}_business_id', table_name=table)
        op.drop_table(table)

    op.drop_index('ix_businesses_name', table_name='businesses')
    op.drop_table('businesses')
