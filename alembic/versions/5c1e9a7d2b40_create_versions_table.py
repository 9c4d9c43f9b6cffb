"""create_versions_table

Revision ID: 5c1e9a7d2b40
Revises:
Create Date: 2026-10-17 10:12:45.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e9a7d2b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Idempotent - init_db() may already have created the table via create_all
    from sqlalchemy import inspect

    bind = op.get_bind()
    inspector = inspect(bind)

    if 'versions' not in inspector.get_table_names():
        op.create_table('versions',
            sa.Column('id', sa.BigInteger().with_variant(sa.Integer(), 'sqlite'), autoincrement=True, nullable=False),
            sa.Column('project_id', sa.BigInteger(), nullable=False),
            sa.Column('identifier_name', sa.String(length=200), nullable=False),
            sa.Column('release_number', sa.String(length=100), nullable=False),
            sa.Column('meta', sa.String(length=200), nullable=True),
            sa.Column('last_updated', sa.DateTime(timezone=True), nullable=False),
            sa.Column('concurrency_token', sa.String(length=32), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )

    inspector = inspect(bind)
    existing_indexes = [idx['name'] for idx in inspector.get_indexes('versions')]

    if 'ix_versions_project_id_identifier_name' not in existing_indexes:
        op.create_index(
            'ix_versions_project_id_identifier_name',
            'versions',
            ['project_id', 'identifier_name'],
            unique=True
        )


def downgrade() -> None:
    op.drop_index('ix_versions_project_id_identifier_name', table_name='versions')
    op.drop_table('versions')
