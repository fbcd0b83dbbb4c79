"""API schemas for the storefront admin API.

Pydantic models for request/response validation and serialization.
JSON keys are camelCase; Python attributes stay snake_case.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storeadmin.catalog.service import MAX_PRODUCT_IMAGES


class ApiModel(BaseModel):
    """Base schema: camelCase aliases, accepts field names and ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(ApiModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error: str = Field(..., description="Human-readable error message")
    error_code: str = Field(..., description="Machine-readable error code")
    details: list[dict] = Field(default_factory=list, description="Additional error details")
    request_id: str | None = Field(default=None, description="Request ID for correlation")


class SuccessResponse(ApiModel):
    """Acknowledgement for deletes."""

    success: bool = True


class UploadResponse(ApiModel):
    """Location of an uploaded file."""

    url: str = Field(..., description="Public URL of the stored image")


# ============================================================================
# Product Schemas
# ============================================================================


class CharacteristicSchema(ApiModel):
    """Product characteristic (name/value pair)."""

    id: int | None = None
    name: str = Field(..., min_length=1, max_length=255)
    value: str = Field(..., max_length=1000)


class ProductImageSchema(ApiModel):
    """Product image."""

    id: int | None = None
    url: str = Field(..., min_length=1, max_length=1000)


class ProductRequest(ApiModel):
    """Request to create or replace a product."""

    name: str = Field(..., min_length=1, max_length=500)
    price: Decimal = Field(default=Decimal("0"), ge=0, description="Price in major units")
    description: str | None = None
    category_id: int | None = None
    search_tree_id: int | None = None
    characteristics: list[CharacteristicSchema] = Field(default_factory=list)
    images: list[ProductImageSchema] = Field(
        default_factory=list,
        max_length=MAX_PRODUCT_IMAGES,
        description="At most five images",
    )


class ProductResponse(ApiModel):
    """Product with its characteristics and images."""

    id: int
    name: str
    price: float
    description: str | None = None
    category_id: int | None = None
    search_tree_id: int | None = None
    characteristics: list[CharacteristicSchema] = Field(default_factory=list)
    images: list[ProductImageSchema] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Taxonomy Schemas
# ============================================================================


class NodeCounts(ApiModel):
    """Direct dependents of a taxonomy node."""

    products: int = 0
    children: int = 0


class TaxonomySummary(ApiModel):
    """Minimal node reference (used for parents)."""

    id: int
    name: str
    slug: str
    parent_id: int | None = None


class TaxonomyNodeResponse(TaxonomySummary):
    """Fields shared by every taxonomy node response."""

    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    count: NodeCounts = Field(default_factory=NodeCounts, alias="_count")


class CategoryRequest(ApiModel):
    """Request to create or update a category."""

    name: str = Field(..., max_length=255)
    parent_id: int | None = None
    description: str | None = None
    image: str | None = Field(default=None, max_length=1000)
    image_url: str | None = Field(default=None, max_length=1000)
    seo_title: str | None = Field(default=None, max_length=255)
    seo_description: str | None = None
    seo_keywords: str | None = None


class CategoryResponse(TaxonomyNodeResponse):
    """Category with nested children."""

    image: str | None = None
    image_url: str | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    seo_keywords: str | None = None
    children: list["CategoryResponse"] = Field(default_factory=list)


class CategoryDetailResponse(CategoryResponse):
    """Category with children, parent and its products."""

    parent: TaxonomySummary | None = None
    products: list[ProductResponse] = Field(default_factory=list)


class SearchTreeNodeRequest(ApiModel):
    """Request to create or update a search tree node."""

    name: str = Field(..., max_length=255)
    parent_id: int | None = None
    description: str | None = None
    icon: str | None = Field(default=None, max_length=255)


class SearchTreeNodeResponse(TaxonomyNodeResponse):
    """Search tree node with nested children."""

    icon: str | None = None
    children: list["SearchTreeNodeResponse"] = Field(default_factory=list)


class SearchTreeNodeDetailResponse(SearchTreeNodeResponse):
    """Search tree node with children, parent and its products."""

    parent: TaxonomySummary | None = None
    products: list[ProductResponse] = Field(default_factory=list)


# ============================================================================
# Homepage Schemas
# ============================================================================


class HomepageRequest(ApiModel):
    """Request to update homepage copy."""

    title: str = Field(..., max_length=500)
    description: str | None = None


class HomepageResponse(ApiModel):
    """Homepage copy."""

    id: int | None = None
    title: str
    description: str | None = None
    updated_at: datetime | None = None
