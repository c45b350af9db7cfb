"""ProductInfo ORM model for commodity identity."""
from sqlalchemy import String, UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from pricewatch.db.base import Base, UUIDMixin, TimestampMixin
from enum import Enum as PyEnum


class ProductStatus(PyEnum):
    """Product lifecycle status.

    State Transitions:
        - (new) → pending (ingestion: no origin history)
        - pending/inactive → active (ingestion: origin history found)
        - any → any (admin curation)
    """
    ACTIVE = "active"
    PENDING = "pending"
    INACTIVE = "inactive"


class ProductInfo(Base, UUIDMixin, TimestampMixin):
    """ProductInfo model identified by the (category, product_name) pair.
    
    Attributes:
        product_name: Commodity name as scraped
        category: Commodity category as scraped
        local_name: Optional vernacular name set by administrators
        status: Lifecycle status (active, pending, inactive)
    """
    
    __tablename__ = "product_info"
    __table_args__ = (
        UniqueConstraint('category', 'product_name', name='uq_product_category_name'),
    )
    
    product_name: Mapped[str] = mapped_column(String(250), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(250), nullable=False, index=True)
    local_name: Mapped[str | None] = mapped_column(String(250), nullable=True)
    status: Mapped[ProductStatus] = mapped_column(
        SQLEnum(
            ProductStatus,
            name="product_status",
            create_constraint=True,
            values_callable=lambda x: [e.value for e in x]
        ),
        nullable=False,
        default=ProductStatus.PENDING,
        index=True
    )
    
    def __repr__(self) -> str:
        return f"<ProductInfo(id={self.id}, category='{self.category}', name='{self.product_name}', status='{self.status.value}')>"
