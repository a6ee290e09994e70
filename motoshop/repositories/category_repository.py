"""Category storage collaborator.

``CategoryStore`` is the narrow interface the hierarchy service depends on;
``SqlCategoryStore`` implements it on top of a SQLAlchemy session.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import ContextManager, Iterator, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError

from motoshop.models.category import Category
from motoshop.exceptions import ConflictError

logger = logging.getLogger(__name__)


class CategoryStore(Protocol):
    """Durable, id-indexed storage of category records."""

    def get(self, category_id: int) -> Category | None: ...

    def find_all(self) -> list[Category]: ...

    def find_by_parent_id(self, parent_id: int | None) -> list[Category]: ...

    def save(self, category: Category) -> Category: ...

    def delete(self, category_id: int) -> None: ...

    def exists(self, category_id: int) -> bool: ...

    def count(self) -> int: ...

    def search_by_name(self, name: str) -> list[Category]: ...

    def find_leaves(self) -> list[Category]: ...

    def touch(self, category: Category) -> None: ...

    def transaction(self) -> ContextManager[None]: ...


class SqlCategoryStore:
    """Category store backed by the ``categories`` table."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def get(self, category_id: int) -> Category | None:
        """Get a category by ID."""
        return self.db.get(Category, category_id)

    def find_all(self) -> list[Category]:
        """Get every category ordered by ID."""
        return self.db.query(Category).order_by(Category.id).all()

    def find_by_parent_id(self, parent_id: int | None) -> list[Category]:
        """Get the direct children of a category, or the roots for ``None``."""
        query = self.db.query(Category)
        if parent_id is None:
            query = query.filter(Category.parent_id.is_(None))
        else:
            query = query.filter(Category.parent_id == parent_id)
        # Categories without a sort order go last, as in the tree
        return query.order_by(
            Category.sort_order.is_(None), Category.sort_order, Category.name, Category.id
        ).all()

    def save(self, category: Category) -> Category:
        """Stage a new or changed category and flush it so the ID is assigned."""
        self.db.add(category)
        self.db.flush()
        return category

    def delete(self, category_id: int) -> None:
        """Delete a category by ID; unknown IDs are ignored."""
        category = self.get(category_id)
        if category is not None:
            self.db.delete(category)
            self.db.flush()

    def exists(self, category_id: int) -> bool:
        """Check if a category exists."""
        return (
            self.db.query(Category.id).filter(Category.id == category_id).first()
            is not None
        )

    def count(self) -> int:
        """Count all categories."""
        return self.db.query(Category).count()

    def search_by_name(self, name: str) -> list[Category]:
        """Case-insensitive substring search on category names."""
        return (
            self.db.query(Category)
            .filter(Category.name.ilike(f"%{name}%"))
            .order_by(Category.name, Category.id)
            .all()
        )

    def find_leaves(self) -> list[Category]:
        """Get categories that no other category points to as parent."""
        parent_ids = select(Category.parent_id).where(Category.parent_id.is_not(None))
        return (
            self.db.query(Category)
            .filter(Category.id.not_in(parent_ids))
            .order_by(Category.id)
            .all()
        )

    def touch(self, category: Category) -> None:
        """Force an UPDATE of the row so its version stamp is bumped on flush.

        A concurrent transaction that read the same row will then fail its
        own versioned write instead of committing against a stale view.
        """
        category.updated_at = datetime.utcnow()
        flag_modified(category, "updated_at")
        self.db.add(category)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit on success, roll back on any error.

        Version mismatches detected by SQLAlchemy are raised as ConflictError.
        """
        try:
            yield
            self.db.commit()
        except StaleDataError as exc:
            self.db.rollback()
            logger.warning(f"Concurrent category update detected: {exc}")
            raise ConflictError(
                "Category hierarchy was changed by another request, please retry"
            ) from exc
        except Exception:
            self.db.rollback()
            raise
