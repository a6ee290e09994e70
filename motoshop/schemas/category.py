"""Pydantic schemas for Category."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


def _strip_name(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("name must not be empty")
    return value


class CategoryBase(BaseModel):
    """Base category schema with common fields."""

    name: str
    description: str | None = None
    image_url: str | None = None
    active: bool = True
    sort_order: int | None = None


class CategoryCreate(CategoryBase):
    """Schema for creating a category."""

    parent_id: int | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _strip_name(value)


class CategoryUpdate(BaseModel):
    """Schema for updating a category.

    Only fields that are explicitly present in the request are applied, so
    ``{"parent_id": null}`` moves the category to the root while omitting
    ``parent_id`` leaves it where it is.
    """

    name: str | None = None
    description: str | None = None
    image_url: str | None = None
    parent_id: int | None = None
    active: bool | None = None
    sort_order: int | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str | None) -> str | None:
        return _strip_name(value)


class CategoryMove(BaseModel):
    """Schema for moving a category under a new parent (or to the root)."""

    parent_id: int | None = None


class CategoryResponse(CategoryBase):
    """Schema for category response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    parent_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryTreeNode(CategoryResponse):
    """A category with its subcategories populated."""

    children: list[CategoryTreeNode] = []


class CategoryStats(BaseModel):
    """Aggregate statistics for one category."""

    category_id: int
    level: int
    direct_product_count: int
    total_product_count: int
    has_products: bool
    has_subcategories: bool


class ParentCheckResponse(BaseModel):
    """Result of a parent legality check."""

    category_id: int
    parent_id: int
    valid: bool


class IntegrityReport(BaseModel):
    """Structural problems found in the category forest."""

    ok: bool
    total_categories: int
    dangling_parent_ids: list[int] = []
    cyclic_ids: list[int] = []
