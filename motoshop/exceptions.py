"""Errors raised by the catalog services."""


class CatalogError(Exception):
    """Base class for catalog service errors."""


class CategoryNotFoundError(CatalogError):
    """A referenced category id does not exist."""

    def __init__(self, category_id: int):
        self.category_id = category_id
        super().__init__(f"Category with ID {category_id} not found")


class InvalidOperationError(CatalogError):
    """The requested change would break a catalog business rule."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ConflictError(CatalogError):
    """A concurrent structural change won the race; the caller may retry."""


class CorruptedHierarchyError(CatalogError):
    """Traversal exceeded its bound, so the stored hierarchy already has a cycle."""

    def __init__(self, category_id: int, message: str | None = None):
        self.category_id = category_id
        super().__init__(
            message or f"Category hierarchy is corrupted near category {category_id}"
        )
