"""create_catalog_tables

Revision ID: 001_create_catalog
Revises:
Create Date: 2026-03-01

Creates categories, shops and products. Products reference shops and
categories by foreign key; deletion is soft (deleted_at).

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001_create_catalog'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True,
                  server_default=sa.text('gen_random_uuid()')),
        sa.Column('name', sa.String(100), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'shops',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True,
                  server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_shops_user_id', 'shops', ['user_id'])

    op.create_table(
        'products',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True,
                  server_default=sa.text('gen_random_uuid()')),
        sa.Column('shop_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('shops.id'), nullable=False),
        sa.Column('category_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.String(255), nullable=False, server_default=''),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('price >= 0', name='chk_product_price_non_negative'),
        sa.CheckConstraint('stock >= 0', name='chk_product_stock_non_negative'),
    )
    op.create_index('idx_products_shop_id', 'products', ['shop_id'])
    op.create_index('idx_products_category_id', 'products', ['category_id'])


def downgrade() -> None:
    op.drop_index('idx_products_category_id', table_name='products')
    op.drop_index('idx_products_shop_id', table_name='products')
    op.drop_table('products')
    op.drop_index('idx_shops_user_id', table_name='shops')
    op.drop_table('shops')
    op.drop_table('categories')
