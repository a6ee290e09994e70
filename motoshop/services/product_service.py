"""Product service for CRUD operations."""

import logging

from sqlalchemy.orm import Session, Query

from motoshop.exceptions import CategoryNotFoundError
from motoshop.models.category import Category
from motoshop.models.product import Product
from motoshop.repositories.category_repository import SqlCategoryStore
from motoshop.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class ProductService:
    """Service for product CRUD operations."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db
        self.categories = SqlCategoryStore(db)

    def _claim_category(self, category_id: int | None) -> None:
        """Bump the target category's version in the product's commit.

        A category delete that read the old version then fails instead of
        leaving the product pointing at a missing category.
        """
        if category_id is None:
            return
        category = self.categories.get(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        self.categories.touch(category)

    def get(self, product_id: int) -> Product | None:
        """Get a product by ID."""
        return self.db.get(Product, product_id)

    def build_query(
        self,
        category_ids: list[int] | None = None,
        available: bool | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        search: str | None = None,
    ) -> Query:
        """Build a product query with the given filters.

        Args:
            category_ids: Only products placed in one of these categories
            available: Filter by availability flag
            min_price: Minimum price
            max_price: Maximum price
            search: Case-insensitive search in the product name

        Returns:
            SQLAlchemy Query object ordered by name
        """
        query = self.db.query(Product)

        if category_ids is not None:
            query = query.filter(Product.category_id.in_(category_ids))
        if available is not None:
            query = query.filter(Product.available == available)
        if min_price is not None:
            query = query.filter(Product.price >= min_price)
        if max_price is not None:
            query = query.filter(Product.price <= max_price)
        if search:
            query = query.filter(Product.name.ilike(f"%{search}%"))

        return query.order_by(Product.name, Product.id)

    def execute_with_pagination(
        self, query: Query, skip: int = 0, limit: int = 50
    ) -> tuple[list[Product], int]:
        """Execute query with pagination and return results with total count."""
        total = query.count()
        products = query.offset(skip).limit(limit).all()
        return products, total

    def create(self, product_in: ProductCreate) -> Product:
        """Create a new product."""
        product = Product(
            name=product_in.name,
            description=product_in.description,
            price=product_in.price,
            stock_quantity=product_in.stock_quantity,
            available=product_in.available,
            image_url=product_in.image_url,
            category_id=product_in.category_id,
        )

        with self.categories.transaction():
            self._claim_category(product.category_id)
            self.db.add(product)
        self.db.refresh(product)
        logger.info(f"Created product {product.id} in category {product.category_id}")
        return product

    def update(self, product: Product, product_in: ProductUpdate) -> Product:
        """Update an existing product."""
        update_data = product_in.model_dump(exclude_unset=True)

        # Columns that cannot be cleared
        for field in ("name", "stock_quantity", "available"):
            if field in update_data and update_data[field] is None:
                del update_data[field]

        with self.categories.transaction():
            if update_data.get("category_id") not in (None, product.category_id):
                self._claim_category(update_data["category_id"])
            for field, value in update_data.items():
                setattr(product, field, value)
        self.db.refresh(product)
        return product

    def delete(self, product: Product) -> None:
        """Delete a product."""
        product_id = product.id
        self.db.delete(product)
        self.db.commit()
        logger.info(f"Deleted product {product_id}")

    def validate_category_exists(self, category_id: int) -> bool:
        """Check if a category exists."""
        return self.db.get(Category, category_id) is not None

    def enrich_with_names(self, product: Product) -> dict:
        """Add category_name to product data."""
        category = (
            self.db.get(Category, product.category_id)
            if product.category_id is not None
            else None
        )
        return {
            "id": product.id,
            "name": product.name,
            "description": product.description,
            "price": product.price_float,
            "stock_quantity": product.stock_quantity,
            "available": product.available,
            "image_url": product.image_url,
            "category_id": product.category_id,
            "created_at": product.created_at,
            "updated_at": product.updated_at,
            "category_name": category.name if category else None,
        }
