"""Storefront catalog.

Provides the taxonomy trees (categories and search tree), products and
homepage copy, with slug generation and tree assembly.
"""

from storeadmin.catalog.models import (
    Category,
    Homepage,
    Product,
    ProductCharacteristic,
    ProductImage,
    SearchTreeNode,
)
from storeadmin.catalog.repository import HomepageRepository, ProductRepository, TaxonomyRepository
from storeadmin.catalog.service import (
    CATEGORY,
    SEARCH_TREE,
    HomepageService,
    ProductService,
    TaxonomyDetail,
    TaxonomyKind,
    TaxonomyService,
)
from storeadmin.catalog.slug import slugify
from storeadmin.catalog.tree import TaxonomyNode, assemble_tree, resolve_descendants

__all__ = [
    # Models
    "Category",
    "Homepage",
    "Product",
    "ProductCharacteristic",
    "ProductImage",
    "SearchTreeNode",
    # Repositories
    "HomepageRepository",
    "ProductRepository",
    "TaxonomyRepository",
    # Services
    "CATEGORY",
    "SEARCH_TREE",
    "HomepageService",
    "ProductService",
    "TaxonomyDetail",
    "TaxonomyKind",
    "TaxonomyService",
    # Taxonomy helpers
    "TaxonomyNode",
    "assemble_tree",
    "resolve_descendants",
    "slugify",
]
