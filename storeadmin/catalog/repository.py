"""Repositories for catalog database operations.

Thin async SQLAlchemy wrappers: no business rules live here, only queries.
"""

from collections.abc import Iterable, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storeadmin.catalog.models import Category, Homepage, Product, SearchTreeNode

NodeT = TypeVar("NodeT", Category, SearchTreeNode)


class TaxonomyRepository(Generic[NodeT]):
    """Repository for one taxonomy table.

    The same class serves categories and search tree nodes; the product
    column pointing at this taxonomy is passed in.

    Example usage:
        async with async_session_factory() as session:
            repo = TaxonomyRepository(session, Category, Product.category_id)
            roots = await repo.list_children_ids({1, 2})
    """

    def __init__(self, session: AsyncSession, model: type[NodeT], product_column: Any) -> None:
        """Initialize repository.

        Args:
            session: Async SQLAlchemy session.
            model: Taxonomy model class.
            product_column: ``Product`` column referencing ``model.id``.
        """
        self.session = session
        self.model = model
        self.product_column = product_column

    async def save(self, node: NodeT) -> NodeT:
        """Add a node and flush so its id is assigned.

        Args:
            node: Node to save.

        Returns:
            Saved node.
        """
        self.session.add(node)
        await self.session.flush()
        return node

    async def delete(self, node: NodeT) -> None:
        """Delete a node and flush.

        Args:
            node: Node to delete.
        """
        await self.session.delete(node)
        await self.session.flush()

    async def get_by_id(self, node_id: int, for_update: bool = False) -> NodeT | None:
        """Get node by ID.

        Args:
            node_id: Node ID.
            for_update: Lock the row until the transaction ends.

        Returns:
            Node if found, None otherwise.
        """
        query = select(self.model).where(self.model.id == node_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_parent_id(self, node_id: int) -> int | None:
        """Get a node's parent id (None for roots and unknown nodes)."""
        result = await self.session.execute(
            select(self.model.parent_id).where(self.model.id == node_id)
        )
        return result.scalar_one_or_none()

    async def lock(self, node_ids: Iterable[int]) -> None:
        """Lock rows until the transaction ends.

        Rows are locked in id order so concurrent callers can't deadlock
        on the same set.

        Args:
            node_ids: Node IDs to lock.
        """
        await self.session.execute(
            select(self.model.id)
            .where(self.model.id.in_(sorted(set(node_ids))))
            .order_by(self.model.id)
            .with_for_update()
        )

    async def get_by_slug(self, slug: str) -> NodeT | None:
        """Get node by slug.

        Args:
            slug: Slug to look up.

        Returns:
            Node if found, None otherwise.
        """
        result = await self.session.execute(select(self.model).where(self.model.slug == slug))
        return result.scalar_one_or_none()

    async def find_by_name(self, name: str, parent_id: int | None) -> NodeT | None:
        """Get the first node with this name under the given parent."""
        query = select(self.model).where(self.model.name == name)
        if parent_id is None:
            query = query.where(self.model.parent_id.is_(None))
        else:
            query = query.where(self.model.parent_id == parent_id)
        result = await self.session.execute(query.order_by(self.model.id).limit(1))
        return result.scalar_one_or_none()

    async def list_all(self) -> Sequence[NodeT]:
        """Get every node of this taxonomy.

        Returns:
            All nodes, unordered.
        """
        result = await self.session.execute(select(self.model))
        return result.scalars().all()

    async def list_children_ids(self, parent_ids: Iterable[int]) -> list[int]:
        """Get ids of nodes whose parent is any of ``parent_ids``.

        Args:
            parent_ids: Parent node IDs.

        Returns:
            Child node IDs.
        """
        result = await self.session.execute(
            select(self.model.id).where(self.model.parent_id.in_(list(parent_ids)))
        )
        return list(result.scalars().all())

    async def count_children(self, node_id: int) -> int:
        """Count direct children of a node."""
        result = await self.session.execute(
            select(func.count(self.model.id)).where(self.model.parent_id == node_id)
        )
        return result.scalar_one()

    async def count_products(self, node_id: int) -> int:
        """Count products referencing a node directly."""
        result = await self.session.execute(
            select(func.count(Product.id)).where(self.product_column == node_id)
        )
        return result.scalar_one()

    async def product_counts(self) -> dict[int, int]:
        """Get direct product counts keyed by node ID.

        Returns:
            Mapping of node ID to product count (nodes without products omitted).
        """
        result = await self.session.execute(
            select(self.product_column, func.count(Product.id))
            .where(self.product_column.is_not(None))
            .group_by(self.product_column)
        )
        return {node_id: count for node_id, count in result.all()}


class ProductRepository:
    """Repository for Product database operations.

    Products are always loaded with their characteristics and images.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    def _query(self) -> Any:
        return select(Product).options(
            selectinload(Product.characteristics),
            selectinload(Product.images),
        )

    async def save(self, product: Product) -> Product:
        """Save a product to database.

        Args:
            product: Product to save.

        Returns:
            Saved product.
        """
        self.session.add(product)
        await self.session.flush()
        return product

    async def delete(self, product: Product) -> None:
        """Delete a product with its characteristics and images."""
        await self.session.delete(product)
        await self.session.flush()

    async def get_by_id(self, product_id: int) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(self._query().where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def find_all(
        self,
        category_id: int | None = None,
        search_tree_id: int | None = None,
    ) -> Sequence[Product]:
        """Find products, optionally filtered by direct taxonomy reference.

        Args:
            category_id: Filter by category.
            search_tree_id: Filter by search tree node.

        Returns:
            Matching products ordered by ID.
        """
        query = self._query()
        if category_id is not None:
            query = query.where(Product.category_id == category_id)
        if search_tree_id is not None:
            query = query.where(Product.search_tree_id == search_tree_id)
        result = await self.session.execute(query.order_by(Product.id))
        return result.scalars().all()

    async def find_by_reference(self, column: Any, node_ids: Iterable[int]) -> Sequence[Product]:
        """Find products whose taxonomy column value is in ``node_ids``.

        Args:
            column: ``Product.category_id`` or ``Product.search_tree_id``.
            node_ids: Accepted node IDs.

        Returns:
            Matching products ordered by ID.
        """
        query = self._query().where(column.in_(list(node_ids)))
        result = await self.session.execute(query.order_by(Product.id))
        return result.scalars().all()


class HomepageRepository:
    """Repository for the single homepage row."""

    HOMEPAGE_ID = 1

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self) -> Homepage | None:
        """Get the homepage row if it was ever saved."""
        return await self.session.get(Homepage, self.HOMEPAGE_ID)

    async def save(self, homepage: Homepage) -> Homepage:
        """Save the homepage row."""
        self.session.add(homepage)
        await self.session.flush()
        return homepage
