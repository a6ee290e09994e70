"""Seed data."""

from motoshop.data.default_categories import DEFAULT_CATEGORIES, ensure_default_categories

__all__ = ["DEFAULT_CATEGORIES", "ensure_default_categories"]
