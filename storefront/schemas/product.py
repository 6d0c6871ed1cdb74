"""
Pydantic schemas for product request/response validation
"""
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

from storefront.schemas.common import MAX_INT


class ProductBase(BaseModel):
    """Base Product schema with common fields"""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Unit price (must be positive)")
    stock: int = Field(..., ge=0, le=MAX_INT, description="Stock quantity (must be non-negative)")
    image_url: Optional[str] = Field(None, max_length=500, description="Product image URL")


class ProductCreate(ProductBase):
    """Schema for creating a new product"""
    pass


class ProductUpdate(BaseModel):
    """
    Schema for updating a product

    Only the fields declared here can be changed; anything else in the
    request body is rejected.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0, le=MAX_INT)
    image_url: Optional[str] = Field(None, max_length=500)

    model_config = ConfigDict(extra="forbid")


class ProductResponse(ProductBase):
    """Schema for product response"""
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    """Schema for list of products response"""
    products: list[ProductResponse]
    total: int


class StockCheckResponse(BaseModel):
    """Schema for stock availability check"""
    product_id: int
    available: bool
    stock: int
    message: Optional[str] = None
