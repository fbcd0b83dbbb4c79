"""Taxonomy API endpoints.

Categories and the search tree expose the same set of endpoints over
different tables; ``build_taxonomy_router`` creates one router per kind.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession

from storeadmin.api.schemas import (
    ErrorResponse,
    ProductResponse,
    SuccessResponse,
    TaxonomySummary,
)
from storeadmin.catalog.service import TaxonomyKind, TaxonomyService
from storeadmin.catalog.tree import TaxonomyNode
from storeadmin.infrastructure.database import get_session

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# ============================================================================
# Converters
# ============================================================================


def record_to_dict(record: Any) -> dict[str, Any]:
    """Read every mapped column of an ORM row into a dict."""
    return {attr.key: getattr(record, attr.key) for attr in sa_inspect(record).mapper.column_attrs}


def node_to_dict(node: TaxonomyNode) -> dict[str, Any]:
    """Convert an assembled node (and its expanded children) to response data."""
    data = record_to_dict(node.record)
    data["children"] = [node_to_dict(child) for child in node.children]
    data["count"] = {"products": node.product_count, "children": node.child_count}
    return data


# ============================================================================
# Router Factory
# ============================================================================


def build_taxonomy_router(
    kind: TaxonomyKind,
    prefix: str,
    tag: str,
    request_model: type[BaseModel],
    response_model: type[BaseModel],
    detail_model: type[BaseModel],
) -> APIRouter:
    """Create the CRUD and tree endpoints for one taxonomy.

    Args:
        kind: Taxonomy handled by the router.
        prefix: URL prefix (e.g., "/categories").
        tag: OpenAPI tag.
        request_model: Create/update body schema.
        response_model: Node schema with nested children.
        detail_model: Single node schema with parent and products.

    Returns:
        Configured router.
    """
    router = APIRouter(prefix=prefix, tags=[tag])
    label = kind.entity_type.lower()

    def get_service(session: Annotated[AsyncSession, Depends(get_session)]) -> TaxonomyService:
        """Get taxonomy service bound to the request session."""
        return TaxonomyService(session, kind)

    Service = Annotated[TaxonomyService, Depends(get_service)]

    def to_response(node: TaxonomyNode) -> Any:
        return response_model.model_validate(node_to_dict(node))

    async def to_single(record: Any, service: TaxonomyService) -> Any:
        data = record_to_dict(record)
        data["count"] = {
            "products": await service.repository.count_products(record.id),
            "children": await service.repository.count_children(record.id),
        }
        return response_model.model_validate(data)

    def split_body(body: Any) -> tuple[str, int | None, dict[str, Any]]:
        metadata = body.model_dump(
            include=set(kind.metadata_fields),
            exclude_unset=True,
        )
        return body.name, body.parent_id, metadata

    @router.get(
        "",
        response_model=list[response_model],  # type: ignore[valid-type]
        summary=f"List {label} tree",
        description="Root nodes nested down to the configured depth, with product and child counts.",
    )
    async def list_nodes(service: Service) -> list[Any]:
        return [to_response(node) for node in await service.list_tree()]

    @router.get(
        "/tree/root",
        response_model=list[response_model],  # type: ignore[valid-type]
        summary=f"Full {label} tree",
        description="Root nodes with every level of children expanded.",
    )
    async def get_root_tree(service: Service) -> list[Any]:
        return [to_response(node) for node in await service.get_full_tree()]

    @router.get(
        "/{node_id}",
        response_model=detail_model,
        responses=ERROR_RESPONSES,
        summary=f"Get {label}",
        description="Single node with its children, parent and directly attached products.",
    )
    async def get_node(node_id: int, service: Service) -> Any:
        detail = await service.get_detail(node_id)
        data = node_to_dict(detail.node)
        data["parent"] = (
            TaxonomySummary.model_validate(detail.parent) if detail.parent is not None else None
        )
        data["products"] = [ProductResponse.model_validate(p) for p in detail.products]
        return detail_model.model_validate(data)

    @router.get(
        "/{node_id}/products",
        response_model=list[ProductResponse],
        responses=ERROR_RESPONSES,
        summary=f"Products under {label}",
        description="Products attached to the node or to any of its descendants.",
    )
    async def list_node_products(node_id: int, service: Service) -> list[ProductResponse]:
        products = await service.list_products(node_id)
        return [ProductResponse.model_validate(p) for p in products]

    @router.post(
        "",
        response_model=response_model,
        status_code=status.HTTP_201_CREATED,
        responses=ERROR_RESPONSES,
        summary=f"Create {label}",
        description="Create a node; the slug is derived from the name.",
    )
    async def create_node(body: request_model, service: Service) -> Any:  # type: ignore[valid-type]
        name, parent_id, metadata = split_body(body)
        record = await service.create(name, parent_id=parent_id, **metadata)
        return await to_single(record, service)

    @router.put(
        "/{node_id}",
        response_model=response_model,
        responses=ERROR_RESPONSES,
        summary=f"Update {label}",
        description="Update a node; the slug is recomputed and a missing parentId moves it to the root.",
    )
    async def update_node(node_id: int, body: request_model, service: Service) -> Any:  # type: ignore[valid-type]
        name, parent_id, metadata = split_body(body)
        record = await service.update(node_id, name, parent_id=parent_id, **metadata)
        return await to_single(record, service)

    @router.delete(
        "/{node_id}",
        response_model=SuccessResponse,
        responses=ERROR_RESPONSES,
        summary=f"Delete {label}",
        description="Delete a node that has no children and no products.",
    )
    async def delete_node(node_id: int, service: Service) -> SuccessResponse:
        await service.delete(node_id)
        return SuccessResponse()

    return router

