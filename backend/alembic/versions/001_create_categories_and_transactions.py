"""create categories and transactions with row level security

Revision ID: 001
Revises: 
Create Date: 2025-05-16 21:43:42
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = '001'
down_revision = None


def _owner_policies(table: str) -> None:
    op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
    op.execute(
        f'CREATE POLICY "Users can read own {table}" ON {table} '
        f"FOR SELECT TO authenticated USING (auth.uid() = owner_id)"
    )
    op.execute(
        f'CREATE POLICY "Users can insert own {table}" ON {table} '
        f"FOR INSERT TO authenticated WITH CHECK (auth.uid() = owner_id)"
    )
    op.execute(
        f'CREATE POLICY "Users can update own {table}" ON {table} '
        f"FOR UPDATE TO authenticated USING (auth.uid() = owner_id) WITH CHECK (auth.uid() = owner_id)"
    )
    op.execute(
        f'CREATE POLICY "Users can delete own {table}" ON {table} '
        f"FOR DELETE TO authenticated USING (auth.uid() = owner_id)"
    )


def upgrade() -> None:
    op.create_table(
        'categories',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('budget_limit', sa.Numeric(), nullable=True),
        sa.Column('owner_id', postgresql.UUID(as_uuid=False), sa.ForeignKey('auth.users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint("type IN ('income', 'expense')", name='categories_type_check'),
    )
    _owner_policies('categories')

    # Version 1 transactions: no currency column yet
    op.create_table(
        'transactions',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('amount', sa.Numeric(), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('owner_id', postgresql.UUID(as_uuid=False), sa.ForeignKey('auth.users.id'), nullable=False),
        sa.Column('category_id', postgresql.UUID(as_uuid=False), sa.ForeignKey('categories.id'), nullable=True),
        sa.CheckConstraint("type IN ('income', 'expense')", name='transactions_type_check'),
    )
    _owner_policies('transactions')

    op.create_index('idx_transactions_owner_id', 'transactions', ['owner_id'])
    op.create_index('idx_transactions_category_id', 'transactions', ['category_id'])
    op.create_index('idx_transactions_created_at', 'transactions', ['created_at'])
    op.create_index('idx_categories_owner_id', 'categories', ['owner_id'])
    op.create_index('idx_categories_type', 'categories', ['type'])


def downgrade() -> None:
    op.drop_table('transactions')
    op.drop_table('categories')
