"""initial schema

Revision ID: 5c1f0e7a9b2d
Revises:
Create Date: 2026-10-12 09:41:27.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1f0e7a9b2d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'organizations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_organizations_code', 'organizations', ['code'], unique=True)

    op.create_table(
        'myboard_boards',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column(
            'organization_id',
            sa.Uuid(),
            sa.ForeignKey('organizations.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('created_by', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('finished_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_myboard_boards_organization_id', 'myboard_boards', ['organization_id'])

    op.create_table(
        'myboard_columns',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'board_id',
            sa.Uuid(),
            sa.ForeignKey('myboard_boards.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('color', sa.String(), nullable=True),
    )
    op.create_index('ix_myboard_columns_board_id', 'myboard_columns', ['board_id'])

    op.create_table(
        'myboard_tasks',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'board_id',
            sa.Uuid(),
            sa.ForeignKey('myboard_boards.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column(
            'column_id',
            sa.Uuid(),
            sa.ForeignKey('myboard_columns.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('due_time', sa.Time(), nullable=True),
        sa.Column('importance_color', sa.String(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('created_by', sa.Uuid(), nullable=False),
        sa.Column('allowed_weekdays', sa.JSON(), nullable=True),
    )
    op.create_index('ix_myboard_tasks_board_id', 'myboard_tasks', ['board_id'])
    op.create_index('ix_myboard_tasks_column_id', 'myboard_tasks', ['column_id'])

    op.create_table(
        'myboard_board_snapshots',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('board_id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('finished_on', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('submitted_by', sa.Uuid(), nullable=True),
        sa.Column('submission_type', sa.String(), nullable=True),
        sa.Column('is_daily', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('column_id', sa.Uuid(), nullable=True),
    )
    op.create_index('ix_myboard_board_snapshots_board_id', 'myboard_board_snapshots', ['board_id'])
    op.create_index(
        'ix_myboard_board_snapshots_organization_id', 'myboard_board_snapshots', ['organization_id']
    )
    op.create_index(
        'uq_board_snapshot_daily',
        'myboard_board_snapshots',
        ['board_id', 'finished_on'],
        unique=True,
        postgresql_where=sa.text('is_daily'),
        sqlite_where=sa.text('is_daily'),
    )

    op.create_table(
        'myboard_column_snapshots',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'board_snapshot_id',
            sa.Uuid(),
            sa.ForeignKey('myboard_board_snapshots.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('original_column_id', sa.Uuid(), nullable=False),
    )
    op.create_index(
        'ix_myboard_column_snapshots_board_snapshot_id',
        'myboard_column_snapshots',
        ['board_snapshot_id'],
    )

    op.create_table(
        'myboard_task_snapshots',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'board_snapshot_id',
            sa.Uuid(),
            sa.ForeignKey('myboard_board_snapshots.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('due_time', sa.Time(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_by', sa.Uuid(), nullable=True),
        sa.Column('importance_color', sa.String(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=True),
        sa.Column('original_column_id', sa.Uuid(), nullable=False),
        sa.Column('original_task_id', sa.Uuid(), nullable=False),
        sa.Column('capture_index', sa.Integer(), nullable=False),
    )
    op.create_index(
        'ix_myboard_task_snapshots_board_snapshot_id',
        'myboard_task_snapshots',
        ['board_snapshot_id'],
    )


def downgrade():
    op.drop_table('myboard_task_snapshots')
    op.drop_table('myboard_column_snapshots')
    op.drop_index('uq_board_snapshot_daily', table_name='myboard_board_snapshots')
    op.drop_table('myboard_board_snapshots')
    op.drop_table('myboard_tasks')
    op.drop_table('myboard_columns')
    op.drop_table('myboard_boards')
    op.drop_index('ix_organizations_code', table_name='organizations')
    op.drop_table('organizations')
