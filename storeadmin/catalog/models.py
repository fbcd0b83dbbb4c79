"""SQLAlchemy models for the storefront catalog.

Defines the two taxonomy trees (categories and search tree), products with
their characteristics and images, and the homepage copy.

Both taxonomy tables are adjacency lists: each row points at its parent
through ``parent_id``. Nested views are assembled at read time.
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from storeadmin.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaxonomyNodeMixin:
    """Columns shared by every taxonomy tree.

    Attributes:
        id: Node identifier.
        name: Display name.
        slug: URL-safe identifier derived from the name, unique per table.
        description: Optional description.
        parent_id: Parent node in the same table (None for roots).
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    @declared_attr
    def parent_id(cls) -> Mapped[int | None]:
        return mapped_column(
            Integer,
            ForeignKey(f"{cls.__tablename__}.id", ondelete="RESTRICT"),
            nullable=True,
            index=True,
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"<{type(self).__name__}(id={self.id}, slug={self.slug}, parent_id={self.parent_id})>"


class Category(TaxonomyNodeMixin, Base):
    """Merchandising category shown in the storefront navigation."""

    __tablename__ = "categories"

    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    seo_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    seo_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    seo_keywords: Mapped[str | None] = mapped_column(Text, nullable=True)


class SearchTreeNode(TaxonomyNodeMixin, Base):
    """Search filter node, a taxonomy independent of categories."""

    __tablename__ = "search_tree_nodes"

    icon: Mapped[str | None] = mapped_column(String(255), nullable=True)


class Product(Base):
    """Product in the catalog.

    Attributes:
        id: Product identifier.
        name: Product name.
        price: Price in major currency units.
        description: Optional description.
        category_id: Optional category reference.
        search_tree_id: Optional search tree reference.
        characteristics: Name/value pairs owned by the product.
        images: Image URLs owned by the product.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    search_tree_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("search_tree_nodes.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    # Relationships
    characteristics: Mapped[list["ProductCharacteristic"]] = relationship(
        "ProductCharacteristic",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductCharacteristic.id",
    )
    images: Mapped[list["ProductImage"]] = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.id",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, name={self.name[:30]})>"


class ProductCharacteristic(Base):
    """Name/value pair describing a product (e.g., "Color": "Red")."""

    __tablename__ = "product_characteristics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str] = mapped_column(String(1000), nullable=False)

    product: Mapped["Product"] = relationship("Product", back_populates="characteristics")


class ProductImage(Base):
    """Image URL attached to a product."""

    __tablename__ = "product_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(String(1000), nullable=False)

    product: Mapped["Product"] = relationship("Product", back_populates="images")


class Homepage(Base):
    """Storefront homepage copy (single row)."""

    __tablename__ = "homepage"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )
