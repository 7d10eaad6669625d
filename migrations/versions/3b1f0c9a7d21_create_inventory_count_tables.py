"""create roles, users, inputs, batches, movements and inventory count tables

Revision ID: 3b1f0c9a7d21
Revises: 
Create Date: 2026-10-19 10:12:44.318201
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '3b1f0c9a7d21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

inventory_count_status = sa.Enum(
    'DRAFT', 'IN_PROGRESS', 'PENDING_APPROVAL', 'APPROVED', 'CANCELLED',
    name='inventorycountstatus',
)
inventory_count_type = sa.Enum('FULL', 'PARTIAL', name='inventorycounttype')
movement_type = sa.Enum('ENTRADA', 'SALIDA', 'AJUSTE', 'RESERVA', 'LIBERACION', name='movementtype')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('is_system_role', sa.Boolean(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_roles_id', 'roles', ['id'])
    op.create_index('ix_roles_name', 'roles', ['name'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('is_superuser', sa.Boolean(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'inputs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('unit_of_measure', sa.String(length=20), nullable=False),
        sa.Column('unit_cost', sa.Numeric(12, 2), nullable=False),
        sa.Column('current_stock', sa.Numeric(12, 2), nullable=False),
        sa.Column('min_stock', sa.Numeric(12, 2), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_inputs_id', 'inputs', ['id'])
    op.create_index('ix_inputs_code', 'inputs', ['code'], unique=True)
    op.create_index('ix_inputs_is_active', 'inputs', ['is_active'])

    op.create_table(
        'input_batches',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('input_id', sa.Integer(), sa.ForeignKey('inputs.id'), nullable=False),
        sa.Column('batch_number', sa.String(length=80), nullable=False),
        sa.Column('initial_quantity', sa.Numeric(12, 2), nullable=False),
        sa.Column('current_quantity', sa.Numeric(12, 2), nullable=False),
        sa.Column('reserved_quantity', sa.Numeric(12, 2), nullable=False),
        sa.Column('unit_cost', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_cost', sa.Numeric(14, 4), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_input_batches_id', 'input_batches', ['id'])
    op.create_index('ix_input_batches_input_id', 'input_batches', ['input_id'])

    op.create_table(
        'input_batch_movements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('input_id', sa.Integer(), sa.ForeignKey('inputs.id'), nullable=False),
        sa.Column('input_batch_id', sa.Integer(), sa.ForeignKey('input_batches.id'), nullable=False),
        sa.Column('movement_type', movement_type, nullable=False),
        sa.Column('quantity', sa.Numeric(12, 2), nullable=False),
        sa.Column('reference_type', sa.String(length=50), nullable=True),
        sa.Column('reference_id', sa.Integer(), nullable=True),
        sa.Column('reason', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_input_batch_movements_id', 'input_batch_movements', ['id'])
    op.create_index('ix_input_batch_movements_input_id', 'input_batch_movements', ['input_id'])

    op.create_table(
        'inventory_counts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('count_number', sa.String(length=50), nullable=False, unique=True),
        sa.Column('count_type', inventory_count_type, nullable=False),
        sa.Column('status', inventory_count_status, nullable=False),
        sa.Column('count_date', sa.Date(), nullable=False),
        sa.Column('counted_by_id', sa.Integer(), nullable=True),
        sa.Column('counted_by_name', sa.String(length=255), nullable=True),
        sa.Column('approved_by_id', sa.Integer(), nullable=True),
        sa.Column('approved_by_name', sa.String(length=255), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('total_items', sa.Integer(), nullable=False),
        sa.Column('items_with_diff', sa.Integer(), nullable=False),
        sa.Column('total_diff_value', sa.Numeric(14, 4), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_inventory_counts_id', 'inventory_counts', ['id'])
    op.create_index('ix_inventory_counts_status', 'inventory_counts', ['status'])

    op.create_table(
        'inventory_count_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'inventory_count_id', sa.Integer(),
            sa.ForeignKey('inventory_counts.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('input_id', sa.Integer(), sa.ForeignKey('inputs.id'), nullable=False),
        sa.Column('input_code', sa.String(length=50), nullable=False),
        sa.Column('input_name', sa.String(length=200), nullable=False),
        sa.Column('unit_of_measure', sa.String(length=20), nullable=False),
        sa.Column('unit_cost', sa.Numeric(12, 2), nullable=False),
        sa.Column('system_quantity', sa.Numeric(12, 2), nullable=False),
        sa.Column('counted_quantity', sa.Numeric(12, 2), nullable=True),
        sa.Column('difference', sa.Numeric(12, 2), nullable=True),
        sa.Column('difference_value', sa.Numeric(14, 4), nullable=True),
        sa.Column('is_counted', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_inventory_count_items_id', 'inventory_count_items', ['id'])
    op.create_index(
        'ix_inventory_count_items_inventory_count_id', 'inventory_count_items', ['inventory_count_id']
    )
    print("✓ [3b1f0c9a7d21] Inventory count tables created")


def downgrade() -> None:
    op.drop_table('inventory_count_items')
    op.drop_table('inventory_counts')
    op.drop_table('input_batch_movements')
    op.drop_table('input_batches')
    op.drop_table('inputs')
    op.drop_table('users')
    op.drop_table('roles')

    bind = op.get_bind()
    for enum_type in (inventory_count_status, inventory_count_type, movement_type):
        enum_type.drop(bind, checkfirst=True)
