"""create player, admin_user, subject, word and score_event tables

Revision ID: 5c2a9e7d1b40
Revises:
Create Date: 2026-10-19 09:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e7d1b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'player' not in existing_tables:
        op.create_table(
            'player',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('phone_number', sa.String(length=32), nullable=True),
            sa.Column('display_name', sa.String(length=64), nullable=True),
            sa.Column('password_hash', sa.String(length=128), nullable=False),
            sa.Column('total_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('games_played', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_player_email', 'player', ['email'], unique=True)

    if 'admin_user' not in existing_tables:
        op.create_table(
            'admin_user',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('password_hash', sa.String(length=128), nullable=False),
            sa.Column('role', sa.String(length=32), nullable=False, server_default='admin'),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_admin_user_email', 'admin_user', ['email'], unique=True)

    if 'subject' not in existing_tables:
        op.create_table(
            'subject',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('difficulty', sa.String(length=16), nullable=False, server_default='easy'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.PrimaryKeyConstraint('id'),
        )

    if 'word' not in existing_tables:
        op.create_table(
            'word',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('subject_id', sa.Integer(), nullable=False),
            sa.Column('word', sa.String(length=64), nullable=False),
            sa.Column('hint', sa.Text(), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.ForeignKeyConstraint(['subject_id'], ['subject.id']),
            sa.PrimaryKeyConstraint('id'),
        )

    if 'score_event' not in existing_tables:
        op.create_table(
            'score_event',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('player_id', sa.Integer(), nullable=False),
            sa.Column('points', sa.Integer(), nullable=False),
            sa.Column('is_challenge', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('subject_id', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['player_id'], ['player.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['subject_id'], ['subject.id'], ondelete='SET NULL'),
            sa.CheckConstraint('points >= 0', name='ck_score_event_points_non_negative'),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_score_event_player_id', 'score_event', ['player_id'])
        op.create_index('ix_score_event_created_at', 'score_event', ['created_at'])


def downgrade():
    op.drop_index('ix_score_event_created_at', table_name='score_event')
    op.drop_index('ix_score_event_player_id', table_name='score_event')
    op.drop_table('score_event')
    op.drop_table('word')
    op.drop_table('subject')
    op.drop_index('ix_admin_user_email', table_name='admin_user')
    op.drop_table('admin_user')
    op.drop_index('ix_player_email', table_name='player')
    op.drop_table('player')
