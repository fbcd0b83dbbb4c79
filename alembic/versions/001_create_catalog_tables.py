"""Create taxonomy, product and homepage tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    ]


def upgrade() -> None:
    """Create categories, search tree, products and homepage tables."""
    # Categories (adjacency list)
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('parent_id', sa.Integer(),
                  sa.ForeignKey('categories.id', ondelete='RESTRICT'), nullable=True, index=True),
        sa.Column('image', sa.String(1000), nullable=True),
        sa.Column('image_url', sa.String(1000), nullable=True),
        sa.Column('seo_title', sa.String(255), nullable=True),
        sa.Column('seo_description', sa.Text(), nullable=True),
        sa.Column('seo_keywords', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)

    # Search tree (independent taxonomy)
    op.create_table(
        'search_tree_nodes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('parent_id', sa.Integer(),
                  sa.ForeignKey('search_tree_nodes.id', ondelete='RESTRICT'), nullable=True, index=True),
        sa.Column('icon', sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_search_tree_nodes_slug', 'search_tree_nodes', ['slug'], unique=True)

    # Products
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(500), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category_id', sa.Integer(),
                  sa.ForeignKey('categories.id', ondelete='RESTRICT'), nullable=True, index=True),
        sa.Column('search_tree_id', sa.Integer(),
                  sa.ForeignKey('search_tree_nodes.id', ondelete='RESTRICT'), nullable=True, index=True),
        *_timestamps(),
    )

    # Product-owned rows
    op.create_table(
        'product_characteristics',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('value', sa.String(1000), nullable=False),
    )
    op.create_table(
        'product_images',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('url', sa.String(1000), nullable=False),
    )

    # Homepage copy (single row)
    op.create_table(
        'homepage',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table('homepage')
    op.drop_table('product_images')
    op.drop_table('product_characteristics')
    op.drop_table('products')
    op.drop_index('ix_search_tree_nodes_slug', table_name='search_tree_nodes')
    op.drop_table('search_tree_nodes')
    op.drop_index('ix_categories_slug', table_name='categories')
    op.drop_table('categories')
