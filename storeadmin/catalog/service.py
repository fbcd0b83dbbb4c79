"""Catalog services.

High-level services that combine repository operations with the taxonomy
rules: slug derivation, tree assembly, cycle prevention and deletion safety.
Every mutating method runs its checks and writes in the session's current
transaction and commits once at the end.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storeadmin.catalog.models import (
    Category,
    Homepage,
    Product,
    ProductCharacteristic,
    ProductImage,
    SearchTreeNode,
)
from storeadmin.catalog.repository import HomepageRepository, ProductRepository, TaxonomyRepository
from storeadmin.catalog.slug import slugify
from storeadmin.catalog.tree import (
    TaxonomyNode,
    assemble_tree,
    resolve_ancestors,
    resolve_descendants,
)
from storeadmin.domain.exceptions import (
    DomainError,
    DuplicateSlugError,
    HasChildrenError,
    HasProductsError,
    NodeInUseError,
    NotFoundError,
    TreeCycleError,
    ValidationError,
)
from storeadmin.infrastructure.config import settings

logger = structlog.get_logger()

MAX_PRODUCT_IMAGES = 5


# ============================================================================
# Taxonomy Kinds
# ============================================================================


@dataclass(frozen=True)
class TaxonomyKind:
    """Describes one taxonomy table.

    Attributes:
        entity_type: Human-readable name used in messages and logs.
        model: ORM model class.
        product_column: Product column that references this taxonomy.
        metadata_fields: Optional columns accepted on create/update.
    """

    entity_type: str
    model: type
    product_column: Any
    metadata_fields: tuple[str, ...]


CATEGORY = TaxonomyKind(
    entity_type="Category",
    model=Category,
    product_column=Product.category_id,
    metadata_fields=(
        "description",
        "image",
        "image_url",
        "seo_title",
        "seo_description",
        "seo_keywords",
    ),
)

SEARCH_TREE = TaxonomyKind(
    entity_type="Search tree node",
    model=SearchTreeNode,
    product_column=Product.search_tree_id,
    metadata_fields=("description", "icon"),
)


@dataclass
class TaxonomyDetail:
    """A single node with its expanded children, parent and direct products."""

    node: TaxonomyNode
    parent: Any | None = None
    products: list[Product] = field(default_factory=list)


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Name is required", details={"field": "name"})
    return cleaned


# ============================================================================
# Taxonomy Service
# ============================================================================


class TaxonomyService:
    """Service for category and search tree operations.

    Example usage:
        async with async_session_factory() as session:
            service = TaxonomyService(session, CATEGORY)
            laptops = await service.create("Laptops", parent_id=computers.id)
            tree = await service.list_tree()
    """

    def __init__(
        self,
        session: AsyncSession,
        kind: TaxonomyKind,
        max_depth: int | None = None,
    ) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
            kind: Which taxonomy this service manages.
            max_depth: Expansion limit for ``list_tree``, defaults to settings.
        """
        self.session = session
        self.kind = kind
        self.max_depth = settings.tree_max_depth if max_depth is None else max_depth
        self.repository = TaxonomyRepository(session, kind.model, kind.product_column)
        self.products = ProductRepository(session)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def _load_nodes(self) -> list[TaxonomyNode]:
        records = await self.repository.list_all()
        counts = await self.repository.product_counts()
        return [TaxonomyNode.from_record(r, counts.get(r.id, 0)) for r in records]

    async def list_tree(self) -> list[TaxonomyNode]:
        """Get root nodes nested down to the configured depth.

        Returns:
            Sorted root nodes.
        """
        nodes = await self._load_nodes()
        return assemble_tree(nodes, max_depth=self.max_depth, entity_type=self.kind.entity_type)

    async def get_full_tree(self) -> list[TaxonomyNode]:
        """Get root nodes with every level expanded.

        Returns:
            Sorted root nodes.
        """
        nodes = await self._load_nodes()
        return assemble_tree(nodes, entity_type=self.kind.entity_type)

    async def get_record(self, node_id: int) -> Any:
        """Get a node row or raise.

        Raises:
            NotFoundError: If the node does not exist.
        """
        record = await self.repository.get_by_id(node_id)
        if record is None:
            raise NotFoundError(self.kind.entity_type, node_id)
        return record

    async def get_detail(self, node_id: int) -> TaxonomyDetail:
        """Get a node with its children, parent and direct products.

        Args:
            node_id: Node ID.

        Returns:
            Node detail.

        Raises:
            NotFoundError: If the node does not exist.
        """
        nodes = await self._load_nodes()
        subtree = assemble_tree(
            nodes,
            root_id=node_id,
            max_depth=self.max_depth,
            entity_type=self.kind.entity_type,
        )
        if not subtree:
            raise NotFoundError(self.kind.entity_type, node_id)

        node = subtree[0]
        parent = None
        if node.parent_id is not None:
            parent = next((n.record for n in nodes if n.id == node.parent_id), None)
        products = await self.products.find_by_reference(self.kind.product_column, [node_id])
        return TaxonomyDetail(node=node, parent=parent, products=list(products))

    async def descendant_ids(self, node_id: int) -> set[int]:
        """Get the node's id plus all descendant ids.

        Args:
            node_id: Starting node.

        Returns:
            Set of ids, always containing ``node_id``.

        Raises:
            CorruptTreeError: If the stored parent chain loops.
        """
        return await resolve_descendants(
            node_id,
            self.repository.list_children_ids,
            entity_type=self.kind.entity_type,
        )

    async def list_products(self, node_id: int) -> Sequence[Product]:
        """Get products attached to the node or any of its descendants.

        Raises:
            NotFoundError: If the node does not exist.
        """
        await self.get_record(node_id)
        ids = await self.descendant_ids(node_id)
        return await self.products.find_by_reference(self.kind.product_column, ids)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(
        self,
        name: str,
        parent_id: int | None = None,
        **metadata: Any,
    ) -> Any:
        """Create a node with a slug derived from its name.

        Args:
            name: Display name.
            parent_id: Parent node, None for a root.
            **metadata: Optional columns from ``kind.metadata_fields``.

        Returns:
            The created row.

        Raises:
            ValidationError: Blank name or unknown parent.
            DuplicateSlugError: Slug already taken.
        """
        name = _clean_name(name)
        slug = slugify(name)
        await self._ensure_parent_exists(parent_id)
        await self._ensure_slug_free(slug)

        record = self.kind.model(
            name=name,
            slug=slug,
            parent_id=parent_id,
            **self._metadata(metadata),
        )
        await self._commit(self.repository.save(record), slug, parent_id)

        logger.info(
            "Taxonomy node created",
            entity_type=self.kind.entity_type,
            node_id=record.id,
            slug=slug,
            parent_id=parent_id,
        )
        return record

    async def update(
        self,
        node_id: int,
        name: str,
        parent_id: int | None = None,
        **metadata: Any,
    ) -> Any:
        """Update a node, recomputing its slug.

        A missing ``parent_id`` moves the node to the root. Metadata columns
        not passed keep their stored value.

        Args:
            node_id: Node to update.
            name: New display name.
            parent_id: New parent node, None for a root.
            **metadata: Optional columns to overwrite.

        Returns:
            The updated row.

        Raises:
            NotFoundError: Node does not exist.
            ValidationError: Blank name or unknown parent.
            TreeCycleError: Parent is the node itself or one of its descendants,
                including moves committed concurrently.
            DuplicateSlugError: Slug taken by another node.
        """
        record = await self.get_record(node_id)
        name = _clean_name(name)
        slug = slugify(name)
        await self._ensure_parent_exists(parent_id)
        if parent_id is not None:
            await self._check_move(node_id, parent_id, lock=True)
        await self._ensure_slug_free(slug, exclude_id=node_id)

        record.name = name
        record.slug = slug
        record.parent_id = parent_id
        for key, value in self._metadata(metadata).items():
            setattr(record, key, value)
        await self._commit(self._flush_move(node_id, parent_id), slug, parent_id, node_id)

        logger.info(
            "Taxonomy node updated",
            entity_type=self.kind.entity_type,
            node_id=node_id,
            slug=slug,
            parent_id=parent_id,
        )
        return record

    async def delete(self, node_id: int) -> None:
        """Delete a node that has no children and no products.

        The row is locked first so the checks and the delete see the same
        state; the RESTRICT foreign keys catch anything that still slips in.

        Args:
            node_id: Node to delete.

        Raises:
            NotFoundError: Node does not exist.
            HasChildrenError: Node still has children.
            HasProductsError: Products still reference the node.
            NodeInUseError: The store refused the delete.
        """
        record = await self.repository.get_by_id(node_id, for_update=True)
        if record is None:
            raise NotFoundError(self.kind.entity_type, node_id)

        child_count = await self.repository.count_children(node_id)
        if child_count:
            logger.info(
                "Taxonomy delete blocked",
                entity_type=self.kind.entity_type,
                node_id=node_id,
                child_count=child_count,
            )
            raise HasChildrenError(self.kind.entity_type, node_id, child_count)

        product_count = await self.repository.count_products(node_id)
        if product_count:
            logger.info(
                "Taxonomy delete blocked",
                entity_type=self.kind.entity_type,
                node_id=node_id,
                product_count=product_count,
            )
            raise HasProductsError(self.kind.entity_type, node_id, product_count)

        try:
            await self.repository.delete(record)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise NodeInUseError(self.kind.entity_type, node_id) from e

        logger.info("Taxonomy node deleted", entity_type=self.kind.entity_type, node_id=node_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _metadata(self, metadata: dict[str, Any]) -> dict[str, Any]:
        unknown = set(metadata) - set(self.kind.metadata_fields)
        if unknown:
            raise ValidationError(
                f"Unknown fields for {self.kind.entity_type}: {sorted(unknown)}",
                details={"fields": sorted(unknown)},
            )
        return metadata

    async def _ensure_parent_exists(self, parent_id: int | None) -> None:
        if parent_id is None:
            return
        if await self.repository.get_by_id(parent_id) is None:
            raise self._missing_parent(parent_id)

    def _missing_parent(self, parent_id: int) -> ValidationError:
        return ValidationError(
            f"Parent {self.kind.entity_type.lower()} {parent_id} does not exist",
            details={"field": "parent_id", "parent_id": parent_id},
        )

    async def _ensure_slug_free(self, slug: str, exclude_id: int | None = None) -> None:
        existing = await self.repository.get_by_slug(slug)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateSlugError(self.kind.entity_type, slug)

    async def _check_move(self, node_id: int, parent_id: int, lock: bool) -> None:
        """Reject a parent that is the node itself or sits below it.

        With ``lock`` the node and the new parent's ancestor chain are locked
        before the final walk, so concurrent moves touching the same chain
        run one after the other.
        """
        locked: set[int] = set()
        while True:
            chain = await resolve_ancestors(
                parent_id,
                self.repository.get_parent_id,
                until=node_id,
                entity_type=self.kind.entity_type,
            )
            if node_id in chain:
                raise TreeCycleError(self.kind.entity_type, [node_id, parent_id])
            wanted = {node_id, *chain}
            if not lock or wanted <= locked:
                return
            await self.repository.lock(wanted)
            locked |= wanted

    async def _flush_move(self, node_id: int, parent_id: int | None) -> None:
        await self.session.flush()
        if parent_id is not None:
            # Moves committed since the first check are visible once our row is written.
            await self._check_move(node_id, parent_id, lock=False)

    async def _commit(
        self,
        pending: Any,
        slug: str,
        parent_id: int | None,
        node_id: int | None = None,
    ) -> None:
        try:
            await pending
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if parent_id is not None and await self.repository.get_by_id(parent_id) is None:
                raise self._missing_parent(parent_id) from e
            await self._ensure_slug_free(slug, exclude_id=node_id)
            raise
        except DomainError:
            await self.session.rollback()
            raise


# ============================================================================
# Product Service
# ============================================================================


class ProductService:
    """Service for product CRUD.

    Characteristics and images belong to their product and are replaced
    wholesale on update.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.repository = ProductRepository(session)

    async def list_products(
        self,
        category_id: int | None = None,
        search_tree_id: int | None = None,
    ) -> Sequence[Product]:
        """List products, optionally filtered by direct taxonomy reference."""
        return await self.repository.find_all(category_id=category_id, search_tree_id=search_tree_id)

    async def get_product(self, product_id: int) -> Product:
        """Get product by ID.

        Raises:
            NotFoundError: If the product does not exist.
        """
        product = await self.repository.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    async def create_product(
        self,
        name: str,
        price: Decimal | float,
        description: str | None = None,
        category_id: int | None = None,
        search_tree_id: int | None = None,
        characteristics: Iterable[tuple[str, str]] = (),
        images: Iterable[str] = (),
    ) -> Product:
        """Create a product with its characteristics and images.

        Args:
            name: Product name.
            price: Non-negative price.
            description: Optional description.
            category_id: Optional category reference.
            search_tree_id: Optional search tree reference.
            characteristics: (name, value) pairs.
            images: Image URLs, at most five.

        Returns:
            Created product.

        Raises:
            ValidationError: Blank name, negative price, too many images or
                unknown taxonomy reference.
        """
        product = Product()
        await self._apply(
            product,
            name,
            price,
            description,
            category_id,
            search_tree_id,
            characteristics,
            images,
        )
        await self.repository.save(product)
        await self.session.commit()

        logger.info("Product created", product_id=product.id, category_id=category_id)
        return product

    async def update_product(
        self,
        product_id: int,
        name: str,
        price: Decimal | float,
        description: str | None = None,
        category_id: int | None = None,
        search_tree_id: int | None = None,
        characteristics: Iterable[tuple[str, str]] = (),
        images: Iterable[str] = (),
    ) -> Product:
        """Replace a product's fields, characteristics and images.

        Raises:
            NotFoundError: If the product does not exist.
            ValidationError: Same rules as ``create_product``.
        """
        product = await self.get_product(product_id)
        await self._apply(
            product,
            name,
            price,
            description,
            category_id,
            search_tree_id,
            characteristics,
            images,
        )
        await self.session.flush()
        await self.session.commit()

        logger.info("Product updated", product_id=product_id)
        return product

    async def delete_product(self, product_id: int) -> None:
        """Delete a product with its characteristics and images.

        Raises:
            NotFoundError: If the product does not exist.
        """
        product = await self.get_product(product_id)
        await self.repository.delete(product)
        await self.session.commit()
        logger.info("Product deleted", product_id=product_id)

    async def _apply(
        self,
        product: Product,
        name: str,
        price: Decimal | float,
        description: str | None,
        category_id: int | None,
        search_tree_id: int | None,
        characteristics: Iterable[tuple[str, str]],
        images: Iterable[str],
    ) -> None:
        price = Decimal(str(price))
        if price < 0:
            raise ValidationError("Price must not be negative", details={"field": "price"})
        urls = list(images)
        if len(urls) > MAX_PRODUCT_IMAGES:
            raise ValidationError(
                f"A product can have at most {MAX_PRODUCT_IMAGES} images",
                details={"field": "images", "count": len(urls)},
            )
        await self._ensure_exists(Category, category_id, "category_id")
        await self._ensure_exists(SearchTreeNode, search_tree_id, "search_tree_id")

        product.name = _clean_name(name)
        product.price = price
        product.description = description
        product.category_id = category_id
        product.search_tree_id = search_tree_id
        product.characteristics = [
            ProductCharacteristic(name=c_name, value=c_value) for c_name, c_value in characteristics
        ]
        product.images = [ProductImage(url=url) for url in urls]

    async def _ensure_exists(self, model: type, ref_id: int | None, field_name: str) -> None:
        if ref_id is not None and await self.session.get(model, ref_id) is None:
            raise ValidationError(
                f"Referenced {model.__name__} {ref_id} does not exist",
                details={"field": field_name, "id": ref_id},
            )


# ============================================================================
# Homepage Service
# ============================================================================


class HomepageService:
    """Service for the storefront homepage copy."""

    DEFAULT_TITLE = "Default Title"
    DEFAULT_DESCRIPTION = "Default Description"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = HomepageRepository(session)

    async def get_homepage(self) -> Homepage:
        """Get the stored homepage, or an unsaved one with default copy."""
        homepage = await self.repository.get()
        if homepage is None:
            return Homepage(title=self.DEFAULT_TITLE, description=self.DEFAULT_DESCRIPTION)
        return homepage

    async def update_homepage(self, title: str, description: str | None) -> Homepage:
        """Create or overwrite the homepage row.

        Args:
            title: Homepage title.
            description: Homepage description.

        Returns:
            Stored homepage.
        """
        homepage = await self.repository.get()
        if homepage is None:
            homepage = Homepage(id=HomepageRepository.HOMEPAGE_ID)
        homepage.title = title
        homepage.description = description
        await self.repository.save(homepage)
        await self.session.commit()

        logger.info("Homepage updated")
        return homepage
