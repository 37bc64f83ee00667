"""catalog taxonomy

Revision ID: 0002_catalog_taxonomy
Revises: 0001_initial_schema
Create Date: 2026-10-19 18:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0002_catalog_taxonomy'
down_revision = '0001_initial_schema'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('categories',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table('subcategories',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_subcategories_category_id', 'subcategories', ['category_id'], unique=False)

    op.create_table('brands',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    # Batch mode so the same revision runs against SQLite
    with op.batch_alter_table('products') as batch_op:
        batch_op.add_column(sa.Column('category_id', sa.Integer(), nullable=True))
        batch_op.add_column(sa.Column('subcategory_id', sa.Integer(), nullable=True))
        batch_op.add_column(sa.Column('brand_id', sa.Integer(), nullable=True))
        batch_op.create_foreign_key('fk_products_category_id', 'categories', ['category_id'], ['id'], ondelete='SET NULL')
        batch_op.create_foreign_key('fk_products_subcategory_id', 'subcategories', ['subcategory_id'], ['id'], ondelete='SET NULL')
        batch_op.create_foreign_key('fk_products_brand_id', 'brands', ['brand_id'], ['id'], ondelete='SET NULL')
        batch_op.create_index('ix_products_category_id', ['category_id'], unique=False)
        batch_op.create_index('ix_products_subcategory_id', ['subcategory_id'], unique=False)
        batch_op.create_index('ix_products_brand_id', ['brand_id'], unique=False)


def downgrade():
    with op.batch_alter_table('products') as batch_op:
        batch_op.drop_index('ix_products_brand_id')
        batch_op.drop_index('ix_products_subcategory_id')
        batch_op.drop_index('ix_products_category_id')
        batch_op.drop_constraint('fk_products_brand_id', type_='foreignkey')
        batch_op.drop_constraint('fk_products_subcategory_id', type_='foreignkey')
        batch_op.drop_constraint('fk_products_category_id', type_='foreignkey')
        batch_op.drop_column('brand_id')
        batch_op.drop_column('subcategory_id')
        batch_op.drop_column('category_id')

    op.drop_table('brands')
    op.drop_index('ix_subcategories_category_id', table_name='subcategories')
    op.drop_table('subcategories')
    op.drop_table('categories')
