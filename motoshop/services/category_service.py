"""Category hierarchy service.

Owns every structural change to the category forest. Storage goes through a
``CategoryStore`` and product counts through a ``ProductCountProvider``; the
service itself keeps no state between calls.
"""

import logging
from typing import Callable, TypeVar

from motoshop.config import settings
from motoshop.exceptions import (
    CategoryNotFoundError,
    ConflictError,
    CorruptedHierarchyError,
    InvalidOperationError,
)
from motoshop.models.category import Category
from motoshop.repositories.category_repository import CategoryStore
from motoshop.repositories.product_repository import ProductCountProvider
from motoshop.schemas.category import (
    CategoryCreate,
    CategoryTreeNode,
    CategoryUpdate,
    IntegrityReport,
)
from motoshop.services.hierarchy import (
    build_forest,
    find_hierarchy_violations,
    is_valid_parent,
    iter_ancestors,
    subtree_totals,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DELETE_POLICIES = ("reparent", "reject")


class CategoryService:
    """Service for category hierarchy operations."""

    def __init__(
        self,
        store: CategoryStore,
        product_counts: ProductCountProvider,
        delete_policy: str | None = None,
        conflict_retries: int | None = None,
    ):
        """Initialize with the storage and product count collaborators."""
        self.store = store
        self.product_counts = product_counts
        self.delete_policy = delete_policy or settings.category_delete_policy
        if self.delete_policy not in DELETE_POLICIES:
            raise ValueError(f"Unknown category delete policy: {self.delete_policy}")
        self.conflict_retries = (
            settings.conflict_retries if conflict_retries is None else conflict_retries
        )

    def _require(self, category_id: int) -> Category:
        category = self.store.get(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    def _run_structural(self, operation: Callable[[], T]) -> T:
        """Run a mutation inside a store transaction, retrying on conflicts.

        Each attempt re-reads and re-validates from scratch because the
        rollback discards everything the previous attempt loaded.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                with self.store.transaction():
                    return operation()
            except ConflictError:
                if attempt > self.conflict_retries:
                    logger.warning(f"Giving up after {attempt} conflicting attempts")
                    raise
                logger.info(f"Conflict on attempt {attempt}, retrying")

    def _ancestors(self, category_id: int, require_root: bool = True) -> list[Category]:
        """The category and its ancestors, nearest first.

        With ``require_root`` the chain must end at a root; a dangling parent
        link is reported as corruption.
        """
        try:
            chain = list(iter_ancestors(category_id, self.store.get, self.store.count()))
            top = chain[-1]
            if require_root and top.parent_id is not None:
                raise CorruptedHierarchyError(
                    top.id,
                    f"Category {top.id} points to missing parent {top.parent_id}",
                )
        except CorruptedHierarchyError as exc:
            logger.error(f"Corrupted category hierarchy: {exc}")
            raise
        return chain

    def _subtree_ids(self, category_id: int) -> list[int]:
        """IDs of a category and all of its descendants, parents before children."""
        limit = self.store.count()
        seen: set[int] = set()
        order: list[int] = []
        stack = [category_id]
        while stack:
            current = stack.pop()
            if current in seen or len(seen) >= limit:
                exc = CorruptedHierarchyError(
                    category_id, f"Subtree of category {category_id} contains a cycle"
                )
                logger.error(f"Corrupted category hierarchy: {exc}")
                raise exc
            seen.add(current)
            order.append(current)
            stack.extend(child.id for child in self.store.find_by_parent_id(current))
        return order

    @staticmethod
    def _clean_name(name: str | None) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise InvalidOperationError("category name must not be empty")
        return cleaned

    def _assign_parent(self, category: Category, new_parent_id: int | None) -> None:
        """Validate and apply a parent change on a loaded category."""
        if new_parent_id is None:
            category.parent_id = None
            return

        if not self.store.exists(new_parent_id):
            raise CategoryNotFoundError(new_parent_id)

        if not is_valid_parent(category.id, new_parent_id, self.store.get, self.store.count()):
            logger.warning(
                f"Rejected moving category {category.id} under {new_parent_id}: circular dependency"
            )
            raise InvalidOperationError("circular dependency")

        # A concurrent move along this chain must fail its versioned write
        for ancestor in self._ancestors(new_parent_id, require_root=False):
            self.store.touch(ancestor)
        category.parent_id = new_parent_id

    def create_category(self, category_in: CategoryCreate) -> Category:
        """Create a new category, optionally under an existing parent."""

        def create() -> Category:
            name = self._clean_name(category_in.name)
            if category_in.parent_id is not None:
                parent = self._require(category_in.parent_id)
                self.store.touch(parent)

            category = Category(
                name=name,
                description=category_in.description,
                image_url=category_in.image_url,
                parent_id=category_in.parent_id,
                active=category_in.active,
                sort_order=category_in.sort_order,
            )
            return self.store.save(category)

        category = self._run_structural(create)
        logger.info(f"Created category {category.id} '{category.name}' under {category.parent_id}")
        return category

    def update_category(self, category_id: int, category_in: CategoryUpdate) -> Category:
        """Apply the fields explicitly set in ``category_in``."""

        def update() -> Category:
            update_data = category_in.model_dump(exclude_unset=True)
            category = self._require(category_id)

            if "name" in update_data:
                update_data["name"] = self._clean_name(update_data["name"])
            if "active" in update_data and update_data["active"] is None:
                del update_data["active"]

            if "parent_id" in update_data:
                new_parent_id = update_data.pop("parent_id")
                if new_parent_id != category.parent_id:
                    self._assign_parent(category, new_parent_id)

            for field, value in update_data.items():
                setattr(category, field, value)

            return self.store.save(category)

        category = self._run_structural(update)
        logger.info(f"Updated category {category_id}")
        return category

    def move_category(self, category_id: int, new_parent_id: int | None) -> Category:
        """Move a category under a new parent, or to the root for ``None``."""

        def move() -> Category:
            category = self._require(category_id)
            if new_parent_id != category.parent_id:
                self._assign_parent(category, new_parent_id)
            return self.store.save(category)

        category = self._run_structural(move)
        logger.info(f"Moved category {category_id} under {new_parent_id}")
        return category

    def delete_category(self, category_id: int) -> None:
        """Delete a category that holds no products.

        Direct children are moved up to the deleted category's parent (or
        rejected, depending on the delete policy). Everything happens in a
        single store transaction.
        """

        def delete() -> int:
            category = self._require(category_id)

            if self.product_counts.has_products(category_id):
                logger.warning(f"Rejected deleting category {category_id}: category has products")
                raise InvalidOperationError("category has products")

            children = self.store.find_by_parent_id(category_id)
            if children and self.delete_policy == "reject":
                logger.warning(
                    f"Rejected deleting category {category_id}: category has subcategories"
                )
                raise InvalidOperationError("category has subcategories")

            new_parent_id = category.parent_id
            if new_parent_id is not None:
                grandparent = self.store.get(new_parent_id)
                if grandparent is not None:
                    self.store.touch(grandparent)
            for child in children:
                child.parent_id = new_parent_id
                self.store.save(child)

            self.store.delete(category_id)
            return len(children)

        moved = self._run_structural(delete)
        logger.info(f"Deleted category {category_id}, reparented {moved} subcategories")

    def get_all_categories(self) -> list[Category]:
        """Get all categories."""
        return self.store.find_all()

    def get_category(self, category_id: int) -> Category:
        """Get a category by ID."""
        return self._require(category_id)

    def count(self) -> int:
        """Count all categories."""
        return self.store.count()

    def get_root_categories(self) -> list[Category]:
        """Get categories without a parent."""
        return self.store.find_by_parent_id(None)

    def get_subcategories(self, parent_id: int) -> list[Category]:
        """Get the direct children of a category."""
        self._require(parent_id)
        return self.store.find_by_parent_id(parent_id)

    def get_leaf_categories(self) -> list[Category]:
        """Get categories without children."""
        return self.store.find_leaves()

    def search_categories_by_name(self, name: str) -> list[Category]:
        """Find categories whose name contains ``name``, ignoring case."""
        return self.store.search_by_name(name)

    def get_categories_with_products(self) -> list[Category]:
        """Get categories referenced by at least one product."""
        counts = self.product_counts.counts_by_category()
        return [c for c in self.store.find_all() if counts.get(c.id, 0) > 0]

    def get_category_tree(self) -> list[CategoryTreeNode]:
        """Get the whole forest with children nested under their parents."""
        forest, unreachable = build_forest(self.store.find_all())
        if unreachable:
            logger.warning(
                f"{len(unreachable)} categories are not reachable from any root: {unreachable}"
            )
        return forest

    def get_category_path(self, category_id: int) -> list[Category]:
        """Get the chain of categories from the root down to ``category_id``."""
        path = self._ancestors(category_id)
        path.reverse()
        return path

    def get_category_level(self, category_id: int) -> int:
        """Get the nesting depth of a category (0 for roots)."""
        return len(self._ancestors(category_id)) - 1

    def get_product_count(self, category_id: int) -> int:
        """Count products placed directly in a category."""
        return self.product_counts.count(category_id)

    def get_total_product_count(self, category_id: int) -> int:
        """Count products in a category and all of its descendants."""
        self._require(category_id)
        return sum(self.product_counts.count(i) for i in self._subtree_ids(category_id))

    def get_descendant_ids(self, category_id: int) -> list[int]:
        """Get a category's ID followed by the IDs of all its descendants."""
        self._require(category_id)
        return self._subtree_ids(category_id)

    def get_product_counts_for_all_categories(self) -> dict[int, int]:
        """Subtree product totals for every category, from one bulk load."""
        try:
            return subtree_totals(self.store.find_all(), self.product_counts.counts_by_category())
        except CorruptedHierarchyError as exc:
            logger.error(f"Corrupted category hierarchy: {exc}")
            raise

    def category_has_products(self, category_id: int) -> bool:
        """Check if any product references the category."""
        return self.product_counts.has_products(category_id)

    def category_has_subcategories(self, category_id: int) -> bool:
        """Check if the category has direct children."""
        return bool(self.store.find_by_parent_id(category_id))

    def is_valid_parent_category(self, category_id: int, parent_id: int) -> bool:
        """Check whether ``parent_id`` could become the parent of ``category_id``."""
        self._require(category_id)
        return is_valid_parent(category_id, parent_id, self.store.get, self.store.count())

    def check_integrity(self) -> IntegrityReport:
        """Report dangling parent links and cycles in the stored forest."""
        report = find_hierarchy_violations(self.store.find_all())
        if not report.ok:
            logger.error(
                f"Category hierarchy integrity check failed: dangling={report.dangling_parent_ids} "
                f"cyclic={report.cyclic_ids}"
            )
        return report
