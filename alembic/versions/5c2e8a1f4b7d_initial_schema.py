"""Initial schema: games, players, quarters, submissions, results, jobs

Revision ID: 5c2e8a1f4b7d
Revises:
Create Date: 2026-10-16 09:12:44.218503

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c2e8a1f4b7d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    ]
    if updated:
        columns.append(
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False)
        )
    return columns


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'games',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('current_quarter', sa.Integer(), nullable=False),
        sa.Column('total_quarters', sa.Integer(), nullable=False),
        sa.Column('quarter_duration_seconds', sa.Integer(), nullable=False),
        sa.Column('max_players', sa.Integer(), nullable=False),
        sa.Column('scoring_preset', sa.String(), nullable=False),
        sa.Column('scoring_weights', sa.JSON(), nullable=True),
        sa.Column('resolution_mode', sa.String(), nullable=False),
        sa.Column('created_by', sa.String(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("status IN ('waiting', 'active', 'completed')", name='ck_games_status'),
        sa.CheckConstraint("resolution_mode IN ('lagged', 'equilibrium')", name='ck_games_resolution_mode'),
        sa.CheckConstraint('current_quarter >= 0', name='ck_games_current_quarter'),
        sa.CheckConstraint('total_quarters > 0', name='ck_games_total_quarters'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'game_players',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('game_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('player_name', sa.String(), nullable=False),
        sa.Column('player_emoji', sa.String(), nullable=True),
        sa.Column('player_score', sa.Integer(), nullable=False),
        sa.Column('player_resources', sa.JSON(), nullable=False),
        sa.Column('starting_resources', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['game_id'], ['games.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('game_id', 'user_id', name='uq_game_players_user'),
    )
    op.create_index('idx_game_players_game', 'game_players', ['game_id'], unique=False)
    op.create_table(
        'quarters',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('game_id', sa.Integer(), nullable=False),
        sa.Column('quarter_number', sa.Integer(), nullable=False),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('resolving_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("status IN ('active', 'resolving', 'completed')", name='ck_quarters_status'),
        sa.ForeignKeyConstraint(['game_id'], ['games.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('game_id', 'quarter_number', name='uq_quarters_number'),
    )
    op.create_index('idx_quarters_status_ends_at', 'quarters', ['status', 'ends_at'], unique=False)
    op.create_table(
        'player_submissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('quarter_id', sa.Integer(), nullable=False),
        sa.Column('game_id', sa.Integer(), nullable=False),
        sa.Column('player_id', sa.String(), nullable=False),
        sa.Column('policies', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['game_id'], ['games.id']),
        sa.ForeignKeyConstraint(['quarter_id'], ['quarters.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('quarter_id', 'player_id', name='uq_player_submissions_player'),
    )
    op.create_index('idx_player_submissions_quarter', 'player_submissions', ['quarter_id'], unique=False)
    op.create_table(
        'quarter_results',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('quarter_id', sa.Integer(), nullable=False),
        sa.Column('game_id', sa.Integer(), nullable=False),
        sa.Column('calculated_state', sa.JSON(), nullable=False),
        sa.Column('player_outcomes', sa.JSON(), nullable=False),
        sa.Column('iterations', sa.Integer(), nullable=False),
        sa.Column('converged', sa.Boolean(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['game_id'], ['games.id']),
        sa.ForeignKeyConstraint(['quarter_id'], ['quarters.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('quarter_id'),
    )
    op.create_table(
        'quarter_snapshots',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('quarter_id', sa.Integer(), nullable=False),
        sa.Column('game_id', sa.Integer(), nullable=False),
        sa.Column('player_id', sa.String(), nullable=False),
        sa.Column('metrics', sa.JSON(), nullable=False),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('rank', sa.Integer(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['game_id'], ['games.id']),
        sa.ForeignKeyConstraint(['quarter_id'], ['quarters.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('quarter_id', 'player_id', name='uq_quarter_snapshots_player'),
    )
    op.create_index('idx_quarter_snapshots_game', 'quarter_snapshots', ['game_id'], unique=False)
    op.create_table(
        'resolution_jobs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('quarter_id', sa.Integer(), nullable=False),
        sa.Column('game_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('last_error', sa.Text(), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("status IN ('pending', 'running', 'done', 'failed')", name='ck_resolution_jobs_status'),
        sa.ForeignKeyConstraint(['game_id'], ['games.id']),
        sa.ForeignKeyConstraint(['quarter_id'], ['quarters.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_resolution_jobs_status', 'resolution_jobs', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_resolution_jobs_status', table_name='resolution_jobs')
    op.drop_table('resolution_jobs')
    op.drop_index('idx_quarter_snapshots_game', table_name='quarter_snapshots')
    op.drop_table('quarter_snapshots')
    op.drop_table('quarter_results')
    op.drop_index('idx_player_submissions_quarter', table_name='player_submissions')
    op.drop_table('player_submissions')
    op.drop_index('idx_quarters_status_ends_at', table_name='quarters')
    op.drop_table('quarters')
    op.drop_index('idx_game_players_game', table_name='game_players')
    op.drop_table('game_players')
    op.drop_table('games')
