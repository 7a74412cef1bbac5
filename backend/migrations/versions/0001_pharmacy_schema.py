"""Pharmacy schema: one table per record-store collection

Revision ID: 0001_pharmacy
Revises:
Create Date: 2026-10-18

Tables:
1. medicines
2. sales (line items as JSON)
3. refunds (line items as JSON, sale_id -> sales.id)
4. udhar (customer credit)
5. expenses
6. settings (single row)
7. users (advisory list, no credentials)
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_pharmacy'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    ]


def upgrade():
    # ==========================================================================
    # 1. MEDICINES
    # ==========================================================================
    op.create_table('medicines',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('company', sa.String(length=200), nullable=False),
        sa.Column('category', sa.String(length=120), nullable=True),
        sa.Column('cost_price', sa.Float(), nullable=False),
        sa.Column('sale_price', sa.Float(), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('reorder_level', sa.Integer(), nullable=False),
        sa.Column('expiry', sa.String(length=32), nullable=True),
        sa.Column('batch_number', sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('medicines', schema=None) as batch_op:
        batch_op.create_index('ix_medicines_name_company', ['name', 'company'], unique=False)

    # ==========================================================================
    # 2. SALES / 3. REFUNDS
    # ==========================================================================
    op.create_table('sales',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('date', sa.String(length=32), nullable=False),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('discount', sa.Float(), nullable=False),
        sa.Column('tax', sa.Float(), nullable=False),
        sa.Column('total', sa.Float(), nullable=False),
        sa.Column('payment_method', sa.String(length=16), nullable=False),
        sa.Column('cash_received', sa.Float(), nullable=True),
        sa.Column('change_returned', sa.Float(), nullable=True),
        sa.Column('customer_name', sa.String(length=200), nullable=True),
        sa.Column('customer_phone', sa.String(length=32), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('sales', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_sales_date'), ['date'], unique=False)

    op.create_table('refunds',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('sale_id', sa.String(length=64), nullable=True),
        sa.Column('invoice_no', sa.String(length=64), nullable=True),
        sa.Column('date', sa.String(length=32), nullable=False),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('reason', sa.String(length=32), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=True),
        sa.Column('customer_name', sa.String(length=200), nullable=True),
        sa.Column('customer_phone', sa.String(length=32), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['sale_id'], ['sales.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('refunds', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_refunds_sale_id'), ['sale_id'], unique=False)

    # ==========================================================================
    # 4. UDHAR / 5. EXPENSES
    # ==========================================================================
    op.create_table('udhar',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('customer_name', sa.String(length=200), nullable=False),
        sa.Column('customer_phone', sa.String(length=32), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('date', sa.String(length=32), nullable=False),
        sa.Column('due_date', sa.String(length=32), nullable=True),
        sa.Column('paid_date', sa.String(length=32), nullable=True),
        sa.Column('invoice_no', sa.String(length=64), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('udhar', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_udhar_status'), ['status'], unique=False)

    op.create_table('expenses',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('date', sa.String(length=32), nullable=False),
        sa.Column('type', sa.String(length=64), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    # ==========================================================================
    # 6. SETTINGS / 7. USERS
    # ==========================================================================
    op.create_table('settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('shop_name', sa.String(length=200), nullable=False),
        sa.Column('currency_symbol', sa.String(length=8), nullable=False),
        sa.Column('default_tax_percent', sa.Float(), nullable=False),
        sa.Column('default_discount_percent', sa.Float(), nullable=False),
        sa.Column('invoice_prefix', sa.String(length=32), nullable=False),
        sa.Column('invoice_footer', sa.String(length=255), nullable=True),
        sa.Column('show_customer_info', sa.Boolean(), nullable=False),
        sa.Column('enable_udhar', sa.Boolean(), nullable=False),
        sa.Column('low_stock_threshold', sa.Integer(), nullable=False),
        sa.Column('expiry_alert_days', sa.Integer(), nullable=False),
        sa.Column('dark_mode', sa.Boolean(), nullable=False),
        sa.Column('glassy_ui', sa.Boolean(), nullable=False),
        sa.Column('compact_sidebar', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('users',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('created_at_iso', sa.String(length=32), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )


def downgrade():
    op.drop_table('users')
    op.drop_table('settings')
    op.drop_table('expenses')
    with op.batch_alter_table('udhar', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_udhar_status'))
    op.drop_table('udhar')
    with op.batch_alter_table('refunds', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_refunds_sale_id'))
    op.drop_table('refunds')
    with op.batch_alter_table('sales', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_sales_date'))
    op.drop_table('sales')
    with op.batch_alter_table('medicines', schema=None) as batch_op:
        batch_op.drop_index('ix_medicines_name_company')
    op.drop_table('medicines')
