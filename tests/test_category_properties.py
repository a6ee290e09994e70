"""Randomized sequences of structural operations.

After every step the stored forest must stay acyclic, every parent link must
resolve, and every path must end at a root.
"""

import random

import pytest

from motoshop.exceptions import InvalidOperationError
from motoshop.schemas.category import CategoryCreate
from motoshop.services.hierarchy import find_hierarchy_violations


def in_subtree(parents, root_id, candidate_id):
    """True if ``candidate_id`` is ``root_id`` or one of its descendants."""
    current = candidate_id
    while current is not None:
        if current == root_id:
            return True
        current = parents[current]
    return False


def assert_forest_is_sound(service):
    categories = service.get_all_categories()
    report = find_hierarchy_violations(categories)
    assert report.ok, report

    for category in categories:
        path = service.get_category_path(category.id)
        assert path[0].parent_id is None
        assert path[-1].id == category.id
        assert len(path) <= len(categories)


@pytest.mark.parametrize("seed", [1, 7, 42, 1234, 2024])
def test_random_operations_keep_the_forest_sound(seed, service, add_products):
    rng = random.Random(seed)
    parents: dict[int, int | None] = {}
    occupied: set[int] = set()

    for step in range(60):
        ids = sorted(parents)
        action = rng.choice(["create", "create", "move", "move", "delete", "stock"]) if ids else "create"

        if action == "create":
            parent_id = rng.choice(ids + [None]) if ids else None
            category = service.create_category(
                CategoryCreate(name=f"Category {step}", parent_id=parent_id)
            )
            parents[category.id] = parent_id

        elif action == "move":
            category_id = rng.choice(ids)
            new_parent_id = rng.choice(ids + [None])
            if new_parent_id is not None and in_subtree(parents, category_id, new_parent_id):
                with pytest.raises(InvalidOperationError):
                    service.move_category(category_id, new_parent_id)
            else:
                service.move_category(category_id, new_parent_id)
                parents[category_id] = new_parent_id

        elif action == "delete":
            category_id = rng.choice(ids)
            if category_id in occupied:
                with pytest.raises(InvalidOperationError):
                    service.delete_category(category_id)
            else:
                grandparent_id = parents.pop(category_id)
                for child_id, parent_id in parents.items():
                    if parent_id == category_id:
                        parents[child_id] = grandparent_id
                service.delete_category(category_id)

        else:
            category_id = rng.choice(ids)
            add_products(category_id, 1)
            occupied.add(category_id)

        stored = {c.id: c.parent_id for c in service.get_all_categories()}
        assert stored == parents
        assert_forest_is_sound(service)
