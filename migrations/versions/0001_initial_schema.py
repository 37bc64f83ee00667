"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

# Enum columns store member names, matching SQLEnum on the models
user_role = sa.Enum('BUYER', 'SELLER', 'DELIVERY', 'ADMIN', 'CITY_CLERK', name='user_role')
payment_method = sa.Enum('CASH', 'TELEBIRR', name='payment_method')
payment_status = sa.Enum('UNPAID', 'PAYMENT_CONFIRMED', name='payment_status')
order_status = sa.Enum(
    'PENDING', 'PAYMENT_CONFIRMED', 'ASSIGNED_FOR_DELIVERY', 'DELIVERED',
    'BUYER_CONFIRMED', 'COMPLETED', 'CANCELLED',
    name='order_status'
)


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'], unique=False)

    op.create_table('sellers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('shop_name', sa.String(length=255), nullable=False),
        sa.Column('shop_description', sa.Text(), nullable=False, server_default=''),
        sa.Column('shop_address', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('business_license', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('government_id', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('national_id_number', sa.String(length=50), nullable=False, server_default=''),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sellers_user_id', 'sellers', ['user_id'], unique=True)

    op.create_table('products',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('seller_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['seller_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_products_seller_id', 'products', ['seller_id'], unique=False)
    op.create_index('ix_products_name', 'products', ['name'], unique=False)

    op.create_table('orders',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('product_id', sa.Integer(), nullable=True),
        sa.Column('seller_id', sa.Integer(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('payment_method', payment_method, nullable=False, server_default='CASH'),
        sa.Column('telebirr_txn_number', sa.String(length=100), nullable=True),
        sa.Column('payment_status', payment_status, nullable=False, server_default='UNPAID'),
        sa.Column('status', order_status, nullable=False, server_default='PENDING'),
        sa.Column('delivery_person_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['seller_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['delivery_person_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_orders_user_id', 'orders', ['user_id'], unique=False)
    op.create_index('ix_orders_product_id', 'orders', ['product_id'], unique=False)
    op.create_index('ix_orders_seller_id', 'orders', ['seller_id'], unique=False)
    op.create_index('ix_orders_status', 'orders', ['status'], unique=False)
    op.create_index('ix_orders_delivery_person_id', 'orders', ['delivery_person_id'], unique=False)

    op.create_table('delivery_profiles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('vehicle_type', sa.String(length=50), nullable=True),
        sa.Column('plate_number', sa.String(length=50), nullable=True),
        sa.Column('license_number', sa.String(length=50), nullable=True),
        sa.Column('national_id', sa.String(length=16), nullable=False),
        sa.Column('profile_image', sa.String(length=500), nullable=True),
        sa.Column('id_card_image', sa.String(length=500), nullable=True),
        sa.Column('availability_status', sa.String(length=10), nullable=False, server_default='offline'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_delivery_profiles_user_id', 'delivery_profiles', ['user_id'], unique=True)

    op.create_table('favorites',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_favorites_user_product')
    )
    op.create_index('ix_favorites_user_id', 'favorites', ['user_id'], unique=False)

    op.create_table('subcities',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )


def downgrade():
    op.drop_table('subcities')
    op.drop_index('ix_favorites_user_id', table_name='favorites')
    op.drop_table('favorites')
    op.drop_index('ix_delivery_profiles_user_id', table_name='delivery_profiles')
    op.drop_table('delivery_profiles')
    for index in ('ix_orders_delivery_person_id', 'ix_orders_status', 'ix_orders_seller_id',
                  'ix_orders_product_id', 'ix_orders_user_id'):
        op.drop_index(index, table_name='orders')
    op.drop_table('orders')
    op.drop_index('ix_products_name', table_name='products')
    op.drop_index('ix_products_seller_id', table_name='products')
    op.drop_table('products')
    op.drop_index('ix_sellers_user_id', table_name='sellers')
    op.drop_table('sellers')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (order_status, payment_status, payment_method, user_role):
        enum_type.drop(bind, checkfirst=True)
