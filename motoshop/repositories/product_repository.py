"""Product count collaborator used by the hierarchy service."""

from typing import Protocol

from sqlalchemy import func
from sqlalchemy.orm import Session

from motoshop.models.product import Product


class ProductCountProvider(Protocol):
    """Reports how many products reference a category."""

    def count(self, category_id: int) -> int: ...

    def has_products(self, category_id: int) -> bool: ...

    def counts_by_category(self) -> dict[int, int]: ...


class SqlProductCountProvider:
    """Product counts read from the ``products`` table."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def count(self, category_id: int) -> int:
        """Count products directly in a category."""
        return (
            self.db.query(func.count(Product.id))
            .filter(Product.category_id == category_id)
            .scalar()
        ) or 0

    def has_products(self, category_id: int) -> bool:
        """Check if any product references the category."""
        return (
            self.db.query(Product.id).filter(Product.category_id == category_id).first()
            is not None
        )

    def counts_by_category(self) -> dict[int, int]:
        """Direct product counts for every category that has products."""
        rows = (
            self.db.query(Product.category_id, func.count(Product.id))
            .filter(Product.category_id.is_not(None))
            .group_by(Product.category_id)
            .all()
        )
        return {category_id: total for category_id, total in rows}
