"""create users, goals, tasks and user_stats tables

Revision ID: create_goalquest_tables
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'create_goalquest_tables'
down_revision = None
branch_labels = None
depends_on = None

GOAL_TYPE = sa.Enum('short', 'medium', 'long', name='goal_type')
TIME_OF_DAY = sa.Enum('morning', 'afternoon', 'evening', 'not_set', name='time_of_day')
REPEAT_TYPE = sa.Enum('none', 'daily', 'every_other_day', 'weekly', 'monthly', name='repeat_type')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'goals',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', GOAL_TYPE, nullable=False),
        sa.Column('parent_goal_id', sa.Integer(), sa.ForeignKey('goals.id', ondelete='SET NULL'), nullable=True),
        sa.Column('deadline', sa.DateTime(), nullable=False),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reflection', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('archived_at', sa.DateTime(), nullable=True),
        sa.Column('longest_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_updated', sa.DateTime(), nullable=True),
    )
    op.create_index(op.f('ix_goals_user_id'), 'goals', ['user_id'])

    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('goal_id', sa.Integer(), sa.ForeignKey('goals.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('scheduled_date', sa.DateTime(), nullable=False),
        sa.Column('time_of_day', TIME_OF_DAY, nullable=False, server_default='not_set'),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('completed_on_time', sa.Boolean(), nullable=True),
        sa.Column('is_repeating', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('repeat_type', REPEAT_TYPE, nullable=False, server_default='none'),
        sa.Column('repeat_until', sa.DateTime(), nullable=True),
        sa.Column('parent_task_id', sa.Integer(), sa.ForeignKey('tasks.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(op.f('ix_tasks_goal_id'), 'tasks', ['goal_id'])

    op.create_table(
        'user_stats',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('longest_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('goals_completed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('goals_shared', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('tasks_completed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('most_productive_day', sa.String(length=20), nullable=True),
        sa.Column('most_productive_time', sa.String(length=20), nullable=True),
        sa.Column('most_tasks_completed_in_day', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('most_tasks_completed_date', sa.DateTime(), nullable=True),
        sa.Column('on_time_completion_rate', sa.Float(), nullable=False, server_default='0'),
        sa.Column('recurring_task_adherence', sa.Float(), nullable=False, server_default='0'),
        sa.Column('short_term_completion_rate', sa.Float(), nullable=False, server_default='0'),
        sa.Column('medium_term_completion_rate', sa.Float(), nullable=False, server_default='0'),
        sa.Column('long_term_completion_rate', sa.Float(), nullable=False, server_default='0'),
        sa.Column('longest_goal_age', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('longest_break_between_completions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('avg_tasks_per_day', sa.Float(), nullable=False, server_default='0'),
        sa.Column('last_updated', sa.DateTime(), nullable=True),
    )


def downgrade():
    op.drop_table('user_stats')
    op.drop_index(op.f('ix_tasks_goal_id'), table_name='tasks')
    op.drop_table('tasks')
    op.drop_index(op.f('ix_goals_user_id'), table_name='goals')
    op.drop_table('goals')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
    REPEAT_TYPE.drop(op.get_bind(), checkfirst=True)
    TIME_OF_DAY.drop(op.get_bind(), checkfirst=True)
    GOAL_TYPE.drop(op.get_bind(), checkfirst=True)
