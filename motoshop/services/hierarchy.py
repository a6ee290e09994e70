"""Pure helpers for reasoning about the category forest.

Nothing in this module touches the database. Callers pass a ``resolve``
function (usually ``CategoryStore.get``) or an already loaded list of
categories, plus the total category count as the traversal bound.
"""

from collections import defaultdict
from typing import Callable, Iterable, Iterator

from motoshop.exceptions import CategoryNotFoundError, CorruptedHierarchyError
from motoshop.models.category import Category
from motoshop.schemas.category import CategoryTreeNode, IntegrityReport

Resolver = Callable[[int], "Category | None"]


def _sort_key(category: Category):
    # Categories without a sort order go last
    sort_order = category.sort_order if category.sort_order is not None else float("inf")
    return (sort_order, category.name or "", category.id)


def is_valid_parent(
    category_id: int,
    candidate_parent_id: int,
    resolve: Resolver,
    max_steps: int,
) -> bool:
    """Decide whether ``candidate_parent_id`` may become the parent of ``category_id``.

    Walks up from the candidate for at most ``max_steps`` hops. A chain that
    ends on an unresolvable id is treated as reaching the top. A chain that
    never reaches a root within the bound is already cyclic and is refused.
    """
    if category_id == candidate_parent_id:
        return False

    current = resolve(candidate_parent_id)
    if current is None:
        return False

    hops = 0
    while current is not None:
        if current.id == category_id:
            return False
        if current.parent_id is None:
            return True
        hops += 1
        if hops >= max_steps:
            return False
        current = resolve(current.parent_id)

    # Dangling parent reference
    return True


def iter_ancestors(
    category_id: int,
    resolve: Resolver,
    max_steps: int,
) -> Iterator[Category]:
    """Yield the category itself and then each ancestor, nearest first.

    Raises:
        CategoryNotFoundError: If ``category_id`` does not resolve
        CorruptedHierarchyError: If more than ``max_steps`` records would be
            yielded, which only happens when the parent chain loops
    """
    current = resolve(category_id)
    if current is None:
        raise CategoryNotFoundError(category_id)

    yielded = 0
    while current is not None:
        yielded += 1
        if yielded > max_steps:
            raise CorruptedHierarchyError(
                category_id,
                f"Parent chain of category {category_id} exceeds {max_steps} hops",
            )
        yield current
        if current.parent_id is None:
            return
        current = resolve(current.parent_id)


def build_forest(categories: Iterable[Category]) -> tuple[list[CategoryTreeNode], list[int]]:
    """Assemble nested tree nodes from a flat list of categories.

    Returns:
        Tuple of (root nodes with children populated, ids of categories that
        are not reachable from any root)
    """
    categories = list(categories)
    children_by_parent: dict[int | None, list[Category]] = defaultdict(list)
    for category in categories:
        children_by_parent[category.parent_id].append(category)
    for siblings in children_by_parent.values():
        siblings.sort(key=_sort_key)

    nodes = {c.id: CategoryTreeNode.model_validate(c) for c in categories}
    forest = [nodes[c.id] for c in children_by_parent.get(None, [])]

    visited: set[int] = set()
    stack = list(forest)
    while stack:
        node = stack.pop()
        visited.add(node.id)
        for child in children_by_parent.get(node.id, []):
            child_node = nodes[child.id]
            node.children.append(child_node)
            stack.append(child_node)

    unreachable = sorted(c.id for c in categories if c.id not in visited)
    return forest, unreachable


def subtree_totals(
    categories: Iterable[Category],
    direct_counts: dict[int, int],
) -> dict[int, int]:
    """Compute product totals for every category's subtree in one pass.

    Categories whose parent is missing are treated as tops of their own
    subtrees.

    Raises:
        CorruptedHierarchyError: If some categories sit on a cycle
    """
    categories = list(categories)
    known_ids = {c.id for c in categories}
    children: dict[int, list[int]] = defaultdict(list)
    tops = []
    for category in categories:
        if category.parent_id is None or category.parent_id not in known_ids:
            tops.append(category.id)
        else:
            children[category.parent_id].append(category.id)

    totals: dict[int, int] = {}
    for top in tops:
        # Iterative post-order: a node is summed once all its children are
        stack = [(top, False)]
        while stack:
            category_id, expanded = stack.pop()
            if expanded:
                totals[category_id] = direct_counts.get(category_id, 0) + sum(
                    totals[child_id] for child_id in children[category_id]
                )
                continue
            stack.append((category_id, True))
            for child_id in children[category_id]:
                stack.append((child_id, False))

    missing = sorted(known_ids - totals.keys())
    if missing:
        raise CorruptedHierarchyError(
            missing[0], f"Categories {missing} are part of a parent cycle"
        )
    return totals


def find_hierarchy_violations(categories: Iterable[Category]) -> IntegrityReport:
    """Scan a flat list of categories for dangling parents and cycles."""
    categories = list(categories)
    by_id = {c.id: c for c in categories}

    dangling = sorted(
        c.id for c in categories if c.parent_id is not None and c.parent_id not in by_id
    )

    # Each id ends up "ok" (chain reaches a root or a dangling id) or "cyclic"
    outcome: dict[int, str] = {}
    for category in categories:
        path: list[int] = []
        on_path: set[int] = set()
        current = category
        while current is not None and current.id not in outcome and current.id not in on_path:
            path.append(current.id)
            on_path.add(current.id)
            current = by_id.get(current.parent_id) if current.parent_id is not None else None

        if current is None:
            result = "ok"
        elif current.id in outcome:
            result = outcome[current.id]
        else:
            result = "cyclic"
        for category_id in path:
            outcome[category_id] = result

    cyclic = sorted(i for i, result in outcome.items() if result == "cyclic")
    return IntegrityReport(
        ok=not dangling and not cyclic,
        total_categories=len(categories),
        dangling_parent_ids=dangling,
        cyclic_ids=cyclic,
    )
