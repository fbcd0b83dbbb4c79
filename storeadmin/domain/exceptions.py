"""Domain exceptions.

All domain-level errors that represent business rule violations.
These exceptions are raised by the catalog services when a taxonomy
invariant would be broken or a referenced record does not exist.
The API layer maps each ``error_code`` to an HTTP status.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(DomainError):
    """Raised when input data breaks a business rule (e.g. blank name)."""

    error_code = "VALIDATION_ERROR"


class TreeCycleError(ValidationError):
    """Raised when a parent assignment would form a cycle."""

    error_code = "TREE_CYCLE"

    def __init__(self, entity_type: str, node_ids: list[int]) -> None:
        """Initialize tree cycle error.

        Args:
            entity_type: Type of taxonomy node (e.g., "Category").
            node_ids: Nodes taking part in the cycle.
        """
        super().__init__(
            f"{entity_type} hierarchy would contain a cycle through nodes {node_ids}",
            details={"entity_type": entity_type, "node_ids": node_ids},
        )


class CorruptTreeError(DomainError):
    """Raised when stored rows already form a parent cycle.

    Unlike ``TreeCycleError`` this is not caused by the request; the
    API reports it as a server error.
    """

    error_code = "TREE_CORRUPT"

    def __init__(self, entity_type: str, node_ids: list[int]) -> None:
        """Initialize corrupt tree error.

        Args:
            entity_type: Type of taxonomy node.
            node_ids: Nodes found on the stored cycle.
        """
        super().__init__(
            f"Stored {entity_type.lower()} hierarchy contains a cycle through nodes {node_ids}",
            details={"entity_type": entity_type, "node_ids": node_ids},
        )


class DuplicateSlugError(DomainError):
    """Raised when a derived slug is already used by another node."""

    error_code = "DUPLICATE_SLUG"

    def __init__(self, entity_type: str, slug: str) -> None:
        """Initialize duplicate slug error.

        Args:
            entity_type: Type of taxonomy node.
            slug: The colliding slug.
        """
        super().__init__(
            f"{entity_type} with slug '{slug}' already exists",
            details={"entity_type": entity_type, "slug": slug},
        )


# ============================================================================
# Lookup Errors
# ============================================================================


class NotFoundError(DomainError):
    """Raised when a record with the requested id does not exist."""

    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: int) -> None:
        """Initialize not found error.

        Args:
            entity_type: Type of entity (e.g., "Category", "Product").
            entity_id: ID that was looked up.
        """
        super().__init__(
            f"{entity_type} {entity_id} not found",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )


# ============================================================================
# Deletion Errors
# ============================================================================


class NodeInUseError(DomainError):
    """Raised when a taxonomy node is still referenced and cannot be deleted."""

    error_code = "NODE_IN_USE"

    def __init__(
        self,
        entity_type: str,
        entity_id: int,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize node in use error.

        Args:
            entity_type: Type of taxonomy node.
            entity_id: ID of the node.
            message: Optional override for the default message.
            details: Optional extra context.
        """
        super().__init__(
            message
            or f"{entity_type} {entity_id} is still referenced; remove its dependents first",
            details={"entity_type": entity_type, "entity_id": entity_id, **(details or {})},
        )


class HasChildrenError(NodeInUseError):
    """Raised when deleting a node that still has child nodes."""

    error_code = "HAS_CHILDREN"

    def __init__(self, entity_type: str, entity_id: int, child_count: int) -> None:
        """Initialize has children error.

        Args:
            entity_type: Type of taxonomy node.
            entity_id: ID of the node.
            child_count: Number of direct children.
        """
        super().__init__(
            entity_type,
            entity_id,
            message=(
                f"{entity_type} {entity_id} has {child_count} child node(s); "
                "delete or move them first"
            ),
            details={"child_count": child_count},
        )


class HasProductsError(NodeInUseError):
    """Raised when deleting a node that products still point at."""

    error_code = "HAS_PRODUCTS"

    def __init__(self, entity_type: str, entity_id: int, product_count: int) -> None:
        """Initialize has products error.

        Args:
            entity_type: Type of taxonomy node.
            entity_id: ID of the node.
            product_count: Number of products referencing the node.
        """
        super().__init__(
            entity_type,
            entity_id,
            message=(
                f"{entity_type} {entity_id} is used by {product_count} product(s); "
                "reassign or delete them first"
            ),
            details={"product_count": product_count},
        )
