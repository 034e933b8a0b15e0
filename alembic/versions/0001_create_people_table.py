"""create_people_table

Revision ID: 0001
Revises:
Create Date: 2026-10-17 09:12:44.310528

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # `unit` holds the canonical workplace value; the column name predates it
    op.create_table('people',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('name', sa.String(length=200), nullable=False),
    sa.Column('callsign', sa.String(length=200), server_default='', nullable=False),
    sa.Column('role', sa.String(length=200), server_default='', nullable=False),
    sa.Column('unit', sa.String(length=200), server_default='', nullable=False),
    sa.Column('description', sa.Text(), server_default='', nullable=False),
    sa.Column('image_url', sa.Text(), server_default='', nullable=False),
    sa.Column('dossier_notes', sa.Text(), server_default='', nullable=False),
    sa.Column('traits', sa.JSON(), server_default='[]', nullable=False),
    sa.Column('proficiencies', sa.JSON(), server_default='[]', nullable=False),
    sa.Column('stats', sa.JSON(), server_default='{}', nullable=False),
    sa.Column('affiliation', sa.String(length=200), server_default='', nullable=False),
    sa.Column('last_seen_lat', sa.Float(), nullable=True),
    sa.Column('last_seen_lng', sa.Float(), nullable=True),
    sa.Column('last_seen_notes', sa.Text(), server_default='', nullable=False),
    sa.Column('last_seen_timestamp', sa.DateTime(timezone=True), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_people_name'), 'people', ['name'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_people_name'), table_name='people')
    op.drop_table('people')
