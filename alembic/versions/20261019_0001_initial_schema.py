"""Create initial schema

Revision ID: 20261019_0001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '20261019_0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def _has_table(bind, name: str) -> bool:
    try:
        insp = inspect(bind)
        return insp.has_table(name)
    except Exception:
        return False

def upgrade() -> None:
    bind = op.get_bind()

    # Catalog tables are owned by the catalog service; create them only when absent
    if not _has_table(bind, 'categories'):
        op.create_table('categories',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )

    if not _has_table(bind, 'rooms'):
        op.create_table('rooms',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('room_number', sa.String(length=20), nullable=False),
            sa.Column('category_id', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(length=20), server_default='available', nullable=False),
            sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_rooms_room_number'), 'rooms', ['room_number'], unique=False)
        op.create_index(op.f('ix_rooms_category_id'), 'rooms', ['category_id'], unique=False)

    op.create_table('bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('grc_no', sa.String(length=20), nullable=False),
        sa.Column('reference_number', sa.String(length=20), nullable=False),
        sa.Column('reservation_id', sa.String(length=100), nullable=True),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('room_number', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('number_of_rooms', sa.Integer(), server_default='1', nullable=False),
        sa.Column('status', sa.String(length=30), nullable=True),
        sa.Column('vip', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('guest_details', sa.JSON(), nullable=True),
        sa.Column('contact_details', sa.JSON(), nullable=True),
        sa.Column('identity_details', sa.JSON(), nullable=True),
        sa.Column('booking_info', sa.JSON(), nullable=True),
        sa.Column('payment_details', sa.JSON(), nullable=True),
        sa.Column('vehicle_details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bookings_id'), 'bookings', ['id'], unique=False)
    op.create_index(op.f('ix_bookings_grc_no'), 'bookings', ['grc_no'], unique=True)
    op.create_index(op.f('ix_bookings_category_id'), 'bookings', ['category_id'], unique=False)
    op.create_index(op.f('ix_bookings_is_active'), 'bookings', ['is_active'], unique=False)

    op.create_table('booking_extensions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('original_check_in', sa.DateTime(), nullable=True),
        sa.Column('original_check_out', sa.DateTime(), nullable=True),
        sa.Column('extended_check_out', sa.DateTime(), nullable=False),
        sa.Column('reason', sa.String(length=500), nullable=True),
        sa.Column('additional_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('payment_mode', sa.String(length=50), nullable=True),
        sa.Column('approved_by', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_booking_extensions_booking_id'), 'booking_extensions', ['booking_id'], unique=False)

    op.create_table('housekeeping_tasks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('cleaning_type', sa.String(length=30), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('priority', sa.String(length=20), server_default='medium', nullable=False),
        sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_housekeeping_tasks_room_id'), 'housekeeping_tasks', ['room_id'], unique=False)

    op.create_table('cash_transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('type', sa.String(length=10), nullable=False),
        sa.Column('source', sa.String(length=30), nullable=False),
        sa.Column('description', sa.Text(), server_default='', nullable=False),
        sa.Column('receptionist_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_cash_transactions_id'), 'cash_transactions', ['id'], unique=False)
    op.create_index(op.f('ix_cash_transactions_source'), 'cash_transactions', ['source'], unique=False)
    op.create_index(op.f('ix_cash_transactions_created_at'), 'cash_transactions', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_table('cash_transactions')
    op.drop_table('housekeeping_tasks')
    op.drop_table('booking_extensions')
    op.drop_table('bookings')
