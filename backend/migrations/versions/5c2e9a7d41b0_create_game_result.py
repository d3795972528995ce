"""create game_result table

Revision ID: 5c2e9a7d41b0
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e9a7d41b0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'game_result' in set(insp.get_table_names()):
        return
    op.create_table(
        'game_result',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('room_id', sa.String(length=16), nullable=False),
        sa.Column('winner', sa.Text(), nullable=True),
        sa.Column('players', sa.Text(), nullable=False),
        sa.Column('deck', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('game_result') as batch_op:
        batch_op.create_index(batch_op.f('ix_game_result_room_id'), ['room_id'], unique=True)


def downgrade():
    with op.batch_alter_table('game_result') as batch_op:
        batch_op.drop_index(batch_op.f('ix_game_result_room_id'))
    op.drop_table('game_result')
