"""Domain layer.

Contains the business rule errors shared by the catalog services and the API.
"""

from storeadmin.domain.exceptions import (
    CorruptTreeError,
    DomainError,
    DuplicateSlugError,
    HasChildrenError,
    HasProductsError,
    NodeInUseError,
    NotFoundError,
    TreeCycleError,
    ValidationError,
)

__all__ = [
    "CorruptTreeError",
    "DomainError",
    "DuplicateSlugError",
    "HasChildrenError",
    "HasProductsError",
    "NodeInUseError",
    "NotFoundError",
    "TreeCycleError",
    "ValidationError",
]
