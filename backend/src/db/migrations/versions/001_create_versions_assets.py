"""Create versions and assets tables.

Revision ID: 001_create_versions_assets
Revises:
Create Date: 2026-10-19

Versions are ordered by created_at, which is the only recency signal used
during update resolution. Assets belong to exactly one version and are
removed with it.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_create_versions_assets'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create versions and assets tables."""
    op.create_table(
        'versions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('channel', sa.String(length=50), nullable=False, server_default='stable'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_versions_name', 'versions', ['name'], unique=True)
    op.create_index('ix_versions_channel_created_at', 'versions', ['channel', 'created_at'])

    op.create_table(
        'assets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.Column('platform', sa.String(length=50), nullable=False),
        sa.Column('filetype', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('size', sa.BigInteger(), nullable=True),
        sa.Column('hash', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['version_id'], ['versions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_assets_version_id', 'assets', ['version_id'])
    op.create_index('ix_assets_platform', 'assets', ['platform'])


def downgrade() -> None:
    """Drop assets and versions tables."""
    op.drop_index('ix_assets_platform', table_name='assets')
    op.drop_index('ix_assets_version_id', table_name='assets')
    op.drop_table('assets')
    op.drop_index('ix_versions_channel_created_at', table_name='versions')
    op.drop_index('ix_versions_name', table_name='versions')
    op.drop_table('versions')
