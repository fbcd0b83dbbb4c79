"""Product API endpoints.

Provides CRUD for catalog products with their characteristics and images.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from storeadmin.api.schemas import ErrorResponse, ProductRequest, ProductResponse, SuccessResponse
from storeadmin.catalog.service import ProductService
from storeadmin.infrastructure.database import get_session

router = APIRouter(prefix="/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(session: Annotated[AsyncSession, Depends(get_session)]) -> ProductService:
    """Get product service bound to the request session."""
    return ProductService(session)


def product_fields(body: ProductRequest) -> dict:
    """Convert a request body to service keyword arguments."""
    return {
        "name": body.name,
        "price": body.price,
        "description": body.description,
        "category_id": body.category_id,
        "search_tree_id": body.search_tree_id,
        "characteristics": [(c.name, c.value) for c in body.characteristics],
        "images": [image.url for image in body.images],
    }


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=list[ProductResponse],
    summary="List products",
    description="List products, optionally filtered by category or search tree node.",
)
async def list_products(
    service: Annotated[ProductService, Depends(get_service)],
    category_id: Annotated[int | None, Query(alias="categoryId")] = None,
    search_tree_id: Annotated[int | None, Query(alias="searchTreeId")] = None,
) -> list[ProductResponse]:
    """List products.

    Args:
        service: Product service.
        category_id: Only products directly in this category.
        search_tree_id: Only products directly in this search tree node.

    Returns:
        Products ordered by ID.
    """
    products = await service.list_products(category_id=category_id, search_tree_id=search_tree_id)
    return [ProductResponse.model_validate(p) for p in products]


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get product",
)
async def get_product(
    product_id: int,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductResponse:
    """Get a product by ID."""
    return ProductResponse.model_validate(await service.get_product(product_id))


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Create product",
)
async def create_product(
    body: ProductRequest,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductResponse:
    """Create a product with characteristics and images."""
    product = await service.create_product(**product_fields(body))
    return ProductResponse.model_validate(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update product",
    description="Replace a product; characteristics and images are replaced wholesale.",
)
async def update_product(
    product_id: int,
    body: ProductRequest,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductResponse:
    """Replace a product."""
    product = await service.update_product(product_id, **product_fields(body))
    return ProductResponse.model_validate(product)


@router.delete(
    "/{product_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Delete product",
)
async def delete_product(
    product_id: int,
    service: Annotated[ProductService, Depends(get_service)],
) -> SuccessResponse:
    """Delete a product with its characteristics and images."""
    await service.delete_product(product_id)
    return SuccessResponse()
