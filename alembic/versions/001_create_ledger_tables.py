"""Create ledger tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

transaction_type = postgresql.ENUM('OUT', 'IN', name='transaction_type', create_type=False)


def upgrade() -> None:
    transaction_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        'vendors',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(128), nullable=False),
        sa.Column('phone', sa.String(32), nullable=True),
        sa.Column('address', sa.String(512), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_vendors_name'), 'vendors', ['name'], unique=True)

    op.create_table(
        'wire_assignments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('wire_name', sa.String(64), nullable=False),
        sa.Column('payal_type', sa.String(64), nullable=False),
        sa.Column('price_per_kg', sa.Numeric(12, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['vendor_id'], ['vendors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('vendor_id', 'wire_name', 'payal_type', name='uq_vendor_wire_payal')
    )
    op.create_index(op.f('ix_wire_assignments_vendor_id'), 'wire_assignments', ['vendor_id'], unique=False)

    op.create_table(
        'wire_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(64), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_wire_items_name'), 'wire_items', ['name'], unique=True)

    op.create_table(
        'payal_types',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('wire_item_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(64), nullable=False),
        sa.Column('legacy_price', sa.Numeric(12, 2), nullable=True),
        sa.ForeignKeyConstraint(['wire_item_id'], ['wire_items.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('wire_item_id', 'name', name='uq_wire_payal_type')
    )
    op.create_index(op.f('ix_payal_types_wire_item_id'), 'payal_types', ['wire_item_id'], unique=False)

    op.create_table(
        'transactions',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('entry_no', sa.Integer(), nullable=False),
        sa.Column('type', transaction_type, nullable=False),
        sa.Column('vendor', sa.String(128), nullable=False),
        sa.Column('item', sa.String(64), nullable=False),
        sa.Column('payal_type', sa.String(64), nullable=True),
        sa.Column('qty', sa.Numeric(12, 3), nullable=False),
        sa.Column('weight', sa.Numeric(12, 3), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('transaction_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_transactions_entry_no'), 'transactions', ['entry_no'], unique=True)
    op.create_index(op.f('ix_transactions_type'), 'transactions', ['type'], unique=False)
    op.create_index(op.f('ix_transactions_vendor'), 'transactions', ['vendor'], unique=False)
    op.create_index(op.f('ix_transactions_item'), 'transactions', ['item'], unique=False)
    op.create_index(op.f('ix_transactions_transaction_date'), 'transactions', ['transaction_date'], unique=False)

    op.create_table(
        'payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('vendor', sa.String(128), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('wire', sa.String(64), nullable=False),
        sa.Column('payal_type', sa.String(64), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_payments_vendor'), 'payments', ['vendor'], unique=False)

    op.create_table(
        'print_statuses',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('vendor_name', sa.String(128), nullable=False),
        sa.Column('page_number', sa.Integer(), nullable=False),
        sa.Column('printed_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('vendor_name', 'page_number', name='uq_print_vendor_page')
    )
    op.create_index(op.f('ix_print_statuses_vendor_name'), 'print_statuses', ['vendor_name'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_print_statuses_vendor_name'), table_name='print_statuses')
    op.drop_table('print_statuses')
    op.drop_index(op.f('ix_payments_vendor'), table_name='payments')
    op.drop_table('payments')
    op.drop_index(op.f('ix_transactions_transaction_date'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_item'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_vendor'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_type'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_entry_no'), table_name='transactions')
    op.drop_table('transactions')
    op.drop_index(op.f('ix_payal_types_wire_item_id'), table_name='payal_types')
    op.drop_table('payal_types')
    op.drop_index(op.f('ix_wire_items_name'), table_name='wire_items')
    op.drop_table('wire_items')
    op.drop_index(op.f('ix_wire_assignments_vendor_id'), table_name='wire_assignments')
    op.drop_table('wire_assignments')
    op.drop_index(op.f('ix_vendors_name'), table_name='vendors')
    op.drop_table('vendors')
    transaction_type.drop(op.get_bind(), checkfirst=True)
