"""Product API endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from motoshop.api.categories import to_http_error
from motoshop.dependencies import CategoryServiceDep, CurrentUser, DbSession
from motoshop.exceptions import CatalogError
from motoshop.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
)
from motoshop.services.product_service import ProductService

router = APIRouter()


@router.get("", response_model=ProductListResponse)
async def list_products(
    db: DbSession,
    categories: CategoryServiceDep,
    user: CurrentUser,
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(50, ge=1, le=100, description="Page size"),
    category_id: int | None = Query(None, description="Category ID filter"),
    include_subcategories: bool = Query(
        False, description="Also include products from all subcategories"
    ),
    available: bool | None = Query(None, description="Availability filter"),
    min_price: float | None = Query(None, ge=0, description="Minimum price"),
    max_price: float | None = Query(None, ge=0, description="Maximum price"),
    search: str | None = Query(None, description="Search in product name"),
):
    """List and filter products.

    With ``include_subcategories=true`` the category filter covers the whole
    subtree below ``category_id``.
    """
    category_ids = None
    if category_id is not None:
        if include_subcategories:
            try:
                category_ids = categories.get_descendant_ids(category_id)
            except CatalogError as exc:
                raise to_http_error(exc)
        else:
            category_ids = [category_id]

    product_service = ProductService(db)
    query = product_service.build_query(
        category_ids=category_ids,
        available=available,
        min_price=min_price,
        max_price=max_price,
        search=search,
    )
    products, total = product_service.execute_with_pagination(query, skip, limit)
    items = [product_service.enrich_with_names(p) for p in products]

    return ProductListResponse(items=items, total=total, skip=skip, limit=limit)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    db: DbSession,
    user: CurrentUser,
):
    """Get a product by ID."""
    product_service = ProductService(db)
    product = product_service.get(product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found",
        )

    return product_service.enrich_with_names(product)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_in: ProductCreate,
    db: DbSession,
    user: CurrentUser,
):
    """Create a new product."""
    product_service = ProductService(db)

    if product_in.category_id is not None and not product_service.validate_category_exists(
        product_in.category_id
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Category '{product_in.category_id}' does not exist",
        )

    try:
        product = product_service.create(product_in)
    except CatalogError as exc:
        raise to_http_error(exc)
    return product_service.enrich_with_names(product)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_in: ProductUpdate,
    db: DbSession,
    user: CurrentUser,
):
    """Update an existing product."""
    product_service = ProductService(db)
    product = product_service.get(product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found",
        )

    # Validate category if being updated
    if product_in.category_id is not None and not product_service.validate_category_exists(
        product_in.category_id
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Category '{product_in.category_id}' does not exist",
        )

    try:
        product = product_service.update(product, product_in)
    except CatalogError as exc:
        raise to_http_error(exc)
    return product_service.enrich_with_names(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    db: DbSession,
    user: CurrentUser,
):
    """Delete a product."""
    product_service = ProductService(db)
    product = product_service.get(product_id)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found",
        )

    product_service.delete(product)
