"""HTTP API for the storefront admin."""

from storeadmin.api.categories import router as categories_router
from storeadmin.api.health import router as health_router
from storeadmin.api.homepage import router as homepage_router
from storeadmin.api.products import router as products_router
from storeadmin.api.search_tree import router as search_tree_router
from storeadmin.api.uploads import router as uploads_router

__all__ = [
    "categories_router",
    "health_router",
    "homepage_router",
    "products_router",
    "search_tree_router",
    "uploads_router",
]
