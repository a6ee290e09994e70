"""Category API endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from motoshop.dependencies import CategoryServiceDep, CurrentUser
from motoshop.exceptions import (
    CatalogError,
    CategoryNotFoundError,
    ConflictError,
    CorruptedHierarchyError,
    InvalidOperationError,
)
from motoshop.schemas.category import (
    CategoryCreate,
    CategoryMove,
    CategoryResponse,
    CategoryStats,
    CategoryTreeNode,
    CategoryUpdate,
    IntegrityReport,
    ParentCheckResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def to_http_error(exc: CatalogError) -> HTTPException:
    """Map a catalog service error onto an HTTP error response."""
    if isinstance(exc, CategoryNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, InvalidOperationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.reason)
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, CorruptedHierarchyError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Category hierarchy is corrupted, contact an administrator",
        )
    logger.error(f"Unhandled catalog error: {exc}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    service: CategoryServiceDep,
    user: CurrentUser,
    search: str | None = Query(None, description="Case-insensitive name search"),
):
    """List all categories, optionally filtered by name."""
    if search:
        return service.search_categories_by_name(search)
    return service.get_all_categories()


@router.get("/tree", response_model=list[CategoryTreeNode])
async def get_category_tree(
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """Get the category forest with subcategories nested under their parents."""
    return service.get_category_tree()


@router.get("/roots", response_model=list[CategoryResponse])
async def list_root_categories(
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """List categories without a parent."""
    return service.get_root_categories()


@router.get("/leaves", response_model=list[CategoryResponse])
async def list_leaf_categories(
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """List categories without subcategories."""
    return service.get_leaf_categories()


@router.get("/with-products", response_model=list[CategoryResponse])
async def list_categories_with_products(
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """List categories that directly hold at least one product."""
    return service.get_categories_with_products()


@router.get("/product-counts", response_model=dict[int, int])
async def get_product_counts(
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """Get the product total (subcategories included) for every category."""
    try:
        return service.get_product_counts_for_all_categories()
    except CatalogError as exc:
        raise to_http_error(exc)


@router.get("/integrity", response_model=IntegrityReport)
async def check_integrity(
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """Report dangling parent references and cycles in the category table."""
    return service.check_integrity()


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: int,
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """Get a category by ID."""
    try:
        return service.get_category(category_id)
    except CatalogError as exc:
        raise to_http_error(exc)


@router.get("/{category_id}/children", response_model=list[CategoryResponse])
async def list_subcategories(
    category_id: int,
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """List the direct subcategories of a category."""
    try:
        return service.get_subcategories(category_id)
    except CatalogError as exc:
        raise to_http_error(exc)


@router.get("/{category_id}/path", response_model=list[CategoryResponse])
async def get_category_path(
    category_id: int,
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """Get the chain of categories from the root down to this one."""
    try:
        return service.get_category_path(category_id)
    except CatalogError as exc:
        raise to_http_error(exc)


@router.get("/{category_id}/stats", response_model=CategoryStats)
async def get_category_stats(
    category_id: int,
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """Get product counts and structural facts for a category."""
    try:
        return CategoryStats(
            category_id=category_id,
            level=service.get_category_level(category_id),
            direct_product_count=service.get_product_count(category_id),
            total_product_count=service.get_total_product_count(category_id),
            has_products=service.category_has_products(category_id),
            has_subcategories=service.category_has_subcategories(category_id),
        )
    except CatalogError as exc:
        raise to_http_error(exc)


@router.get("/{category_id}/valid-parent/{parent_id}", response_model=ParentCheckResponse)
async def check_parent(
    category_id: int,
    parent_id: int,
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """Check whether a category could be moved under the given parent."""
    try:
        valid = service.is_valid_parent_category(category_id, parent_id)
    except CatalogError as exc:
        raise to_http_error(exc)
    return ParentCheckResponse(category_id=category_id, parent_id=parent_id, valid=valid)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_in: CategoryCreate,
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """Create a new category.

    A blank name is rejected by request validation (422). A missing parent
    gives 404.
    """
    try:
        return service.create_category(category_in)
    except CatalogError as exc:
        raise to_http_error(exc)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    category_in: CategoryUpdate,
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """Update an existing category.

    Send ``"parent_id": null`` to move the category to the root; leave the
    field out to keep the current parent.
    A blank name fails request validation (422); an explicit ``"name": null``
    is refused by the service (400).
    """
    try:
        return service.update_category(category_id, category_in)
    except CatalogError as exc:
        raise to_http_error(exc)


@router.post("/{category_id}/move", response_model=CategoryResponse)
async def move_category(
    category_id: int,
    move_in: CategoryMove,
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """Move a category under a new parent, or to the root."""
    try:
        return service.move_category(category_id, move_in.parent_id)
    except CatalogError as exc:
        raise to_http_error(exc)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    service: CategoryServiceDep,
    user: CurrentUser,
):
    """Delete a category.

    Note: This will fail if the category has products. Subcategories are
    moved up to the deleted category's parent, unless the delete policy is
    "reject", in which case a category with subcategories cannot be deleted.
    """
    try:
        service.delete_category(category_id)
    except CatalogError as exc:
        raise to_http_error(exc)
