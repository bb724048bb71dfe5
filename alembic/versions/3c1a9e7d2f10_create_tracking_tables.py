"""create order_items, operators and order_logs tables

Revision ID: 3c1a9e7d2f10
Revises:
Create Date: 2026-10-17 09:12:41.318205

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3c1a9e7d2f10'
down_revision = None
branch_labels = None
depends_on = None

ORDER_STATUS = sa.Enum(
    'not_started', 'running', 'paused', 'done', 'drying', 'packing', 'ready_for_delivery',
    name='orderstatus', native_enum=False, length=32,
)


def upgrade():
    op.create_table('order_items',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('order_number', sa.String(length=128), nullable=False),
        sa.Column('customer', sa.String(length=255), nullable=True),
        sa.Column('product_code', sa.String(length=128), nullable=False),
        sa.Column('ml', sa.Float(), nullable=True),
        sa.Column('qty_in_oven', sa.Integer(), nullable=True),
        sa.Column('requested_qty', sa.Integer(), nullable=False),
        sa.Column('step_count', sa.Integer(), nullable=False),
        sa.Column('step_progress', sa.JSON(), nullable=False),
        sa.Column('step_time', sa.JSON(), nullable=False),
        sa.Column('fully_done_qty', sa.Integer(), nullable=False),
        sa.Column('status', ORDER_STATUS, nullable=False),
        sa.Column('status_changed_at', sa.DateTime(), nullable=True),
        sa.Column('elapsed_sec', sa.Integer(), nullable=False),
        sa.Column('timer_started_at', sa.DateTime(), nullable=True),
        sa.Column('last_stop', sa.JSON(), nullable=True),
        sa.Column('batches', sa.JSON(), nullable=False),
        sa.Column('notes', sa.JSON(), nullable=False),
        sa.Column('packed_qty', sa.Integer(), nullable=False),
        sa.Column('boxes', sa.Integer(), nullable=True),
        sa.Column('size', sa.String(length=64), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('packing_notes', sa.String(length=1024), nullable=True),
        sa.Column('hidden', sa.Boolean(), nullable=False),
        sa.Column('forced_completed', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_order_items_id', 'order_items', ['id'])
    op.create_index('ix_order_items_order_number', 'order_items', ['order_number'])

    op.create_table('operators',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index('ix_operators_id', 'operators', ['id'])

    op.create_table('order_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_item_id', sa.String(length=255), nullable=False),
        sa.Column('operator_name', sa.String(length=255), nullable=False),
        sa.Column('step_number', sa.Integer(), nullable=False),
        sa.Column('pieces_done', sa.Integer(), nullable=False),
        sa.Column('notes', sa.String(length=1024), nullable=True),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('stopped_at', sa.DateTime(), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.ForeignKeyConstraint(['order_item_id'], ['order_items.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_order_logs_id', 'order_logs', ['id'])
    op.create_index('ix_order_logs_order_item_id', 'order_logs', ['order_item_id'])


def downgrade():
    op.drop_table('order_logs')
    op.drop_table('operators')
    op.drop_table('order_items')
