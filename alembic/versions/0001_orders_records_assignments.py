"""orders, order records, machine assignments

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('orders',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('reference_no', sa.String(length=50), nullable=False),
    sa.Column('customer_id', sa.String(length=50), nullable=False),
    sa.Column('date', sa.Date(), nullable=False),
    sa.Column('quantity', sa.Integer(), nullable=False),
    sa.Column('delivery_date', sa.Date(), nullable=False),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('delivery_quantity', sa.Integer(), nullable=False),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_orders')),
    sa.UniqueConstraint('reference_no', name=op.f('uq_orders_reference_no')),
    sa.CheckConstraint('quantity > 0', name=op.f('ck_orders_quantity_positive')),
    sa.CheckConstraint('delivery_quantity >= 0', name=op.f('ck_orders_delivery_quantity_non_negative'))
    )
    op.create_index(op.f('ix_orders_customer_id'), 'orders', ['customer_id'], unique=False)
    op.create_index(op.f('ix_orders_status'), 'orders', ['status'], unique=False)

    op.create_table('order_records',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('order_id', sa.Integer(), nullable=False),
    sa.Column('item_id', sa.String(length=50), nullable=True),
    sa.Column('quantity', sa.Integer(), nullable=False),
    sa.Column('wash_type', sa.String(length=50), nullable=False),
    sa.Column('process_types', sa.JSON(), nullable=False),
    sa.Column('tracking_number', sa.String(length=20), nullable=True),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('damage_count', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['order_id'], ['orders.id'], name=op.f('fk_order_records_order_id_orders'), ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_order_records')),
    sa.CheckConstraint('quantity > 0', name=op.f('ck_order_records_quantity_positive')),
    sa.CheckConstraint('damage_count >= 0', name=op.f('ck_order_records_damage_count_non_negative'))
    )
    op.create_index(op.f('ix_order_records_order_id'), 'order_records', ['order_id'], unique=False)
    op.create_index(op.f('ix_order_records_tracking_number'), 'order_records', ['tracking_number'], unique=False)

    op.create_table('machine_assignments',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('record_id', sa.Integer(), nullable=False),
    sa.Column('order_id', sa.Integer(), nullable=False),
    sa.Column('assigned_by_id', sa.Integer(), nullable=False),
    sa.Column('quantity', sa.Integer(), nullable=False),
    sa.Column('return_quantity', sa.Integer(), nullable=True),
    sa.Column('washing_machine', sa.String(length=50), nullable=True),
    sa.Column('drying_machine', sa.String(length=50), nullable=True),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('tracking_number', sa.String(length=20), nullable=True),
    sa.Column('assigned_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['order_id'], ['orders.id'], name=op.f('fk_machine_assignments_order_id_orders'), ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['record_id'], ['order_records.id'], name=op.f('fk_machine_assignments_record_id_order_records'), ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name=op.f('pk_machine_assignments')),
    sa.CheckConstraint('quantity > 0', name=op.f('ck_machine_assignments_quantity_positive')),
    sa.CheckConstraint('return_quantity IS NULL OR return_quantity >= 0', name=op.f('ck_machine_assignments_return_quantity_non_negative'))
    )
    op.create_index(op.f('ix_machine_assignments_record_id'), 'machine_assignments', ['record_id'], unique=False)
    op.create_index(op.f('ix_machine_assignments_order_id'), 'machine_assignments', ['order_id'], unique=False)
    op.create_index(op.f('ix_machine_assignments_assigned_by_id'), 'machine_assignments', ['assigned_by_id'], unique=False)
    op.create_index(op.f('ix_machine_assignments_status'), 'machine_assignments', ['status'], unique=False)
    op.create_index(op.f('ix_machine_assignments_tracking_number'), 'machine_assignments', ['tracking_number'], unique=False)


def downgrade() -> None:
    op.drop_table('machine_assignments')
    op.drop_table('order_records')
    op.drop_table('orders')
