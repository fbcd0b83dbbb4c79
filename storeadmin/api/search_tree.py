"""Search tree API endpoints.

The search tree is a filter taxonomy kept apart from categories; it
exposes the same endpoints, including products under a node's subtree.
"""

from storeadmin.api.schemas import (
    SearchTreeNodeDetailResponse,
    SearchTreeNodeRequest,
    SearchTreeNodeResponse,
)
from storeadmin.api.taxonomy import build_taxonomy_router
from storeadmin.catalog.service import SEARCH_TREE

router = build_taxonomy_router(
    SEARCH_TREE,
    prefix="/search-tree",
    tag="Search Tree",
    request_model=SearchTreeNodeRequest,
    response_model=SearchTreeNodeResponse,
    detail_model=SearchTreeNodeDetailResponse,
)
