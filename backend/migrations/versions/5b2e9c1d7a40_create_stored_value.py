"""create stored_value key/value table for the SQL leaderboard backend

Revision ID: 5b2e9c1d7a40
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5b2e9c1d7a40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Tables created earlier via `flask leaderboard-reset` are left untouched
    if 'stored_value' in set(insp.get_table_names()):
        return

    op.create_table(
        'stored_value',
        sa.Column('key', sa.String(length=128), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'stored_value' in set(insp.get_table_names()):
        op.drop_table('stored_value')
