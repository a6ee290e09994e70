"""Pydantic schemas for Product."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    """Base product schema with common fields."""

    name: str = Field(min_length=1)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    available: bool = True
    image_url: str | None = None
    category_id: int | None = None


class ProductCreate(ProductBase):
    """Schema for creating a product."""

    pass


class ProductUpdate(BaseModel):
    """Schema for updating a product."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    stock_quantity: int | None = Field(default=None, ge=0)
    available: bool | None = None
    image_url: str | None = None
    category_id: int | None = None


class ProductResponse(BaseModel):
    """Schema for product response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    price: float | None = None
    stock_quantity: int
    available: bool
    image_url: str | None = None
    category_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Resolved category name
    category_name: str | None = None


class ProductListResponse(BaseModel):
    """Schema for paginated product list response."""

    items: list[ProductResponse]
    total: int
    skip: int
    limit: int
