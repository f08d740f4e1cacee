"""add currency to transactions (schema version 2)

Existing rows become USD, the only default ever applied.

Revision ID: 002
Revises: 001
Create Date: 2025-05-16 21:46:16
"""

from alembic import op
import sqlalchemy as sa


revision = '002'
down_revision = '001'


def upgrade() -> None:
    op.add_column(
        'transactions',
        sa.Column('currency', sa.Text(), nullable=False, server_default='USD')
    )


def downgrade() -> None:
    op.drop_column('transactions', 'currency')
