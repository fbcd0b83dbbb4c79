"""Category API endpoints.

Merchandising category tree: CRUD, nested listings and product lookup.
"""

from storeadmin.api.schemas import CategoryDetailResponse, CategoryRequest, CategoryResponse
from storeadmin.api.taxonomy import build_taxonomy_router
from storeadmin.catalog.service import CATEGORY

router = build_taxonomy_router(
    CATEGORY,
    prefix="/categories",
    tag="Categories",
    request_model=CategoryRequest,
    response_model=CategoryResponse,
    detail_model=CategoryDetailResponse,
)
