"""Initial garden schema

Revision ID: 0000_initial
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0000_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'beds',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('width', sa.Float(), nullable=False),
        sa.Column('height', sa.Float(), nullable=False),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
    )

    op.create_table(
        'plantings',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('bed_id', sa.String(length=36), sa.ForeignKey('beds.id', ondelete='CASCADE'), nullable=False),
        sa.Column('crop_name', sa.String(length=200), nullable=False),
        sa.Column('planting_date', sa.BigInteger(), nullable=False),
        sa.Column('harvest_date', sa.BigInteger()),
        sa.Column('notes', sa.Text()),
        sa.Column('companion_plants', sa.JSON()),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
    )
    op.create_index('ix_plantings_bed_id', 'plantings', ['bed_id'], unique=False)

    op.create_table(
        'tasks',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('bed_id', sa.String(length=36), sa.ForeignKey('beds.id', ondelete='CASCADE')),
        sa.Column('planting_id', sa.String(length=36)),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('notes', sa.Text()),
        sa.Column('due_date', sa.BigInteger(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
    )
    op.create_index('ix_tasks_bed_id', 'tasks', ['bed_id'], unique=False)

    op.create_table(
        'journal_entries',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('date', sa.BigInteger(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('bed_id', sa.String(length=36)),
        sa.Column('planting_id', sa.String(length=36)),
        sa.Column('tags', sa.JSON()),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
    )

    op.create_table(
        'user_profiles',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('location', sa.String(length=200), nullable=False),
    )


def downgrade():
    op.drop_table('user_profiles')
    op.drop_table('journal_entries')
    op.drop_index('ix_tasks_bed_id', table_name='tasks')
    op.drop_table('tasks')
    op.drop_index('ix_plantings_bed_id', table_name='plantings')
    op.drop_table('plantings')
    op.drop_table('beds')
