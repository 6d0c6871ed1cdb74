"""
Pydantic schemas for the shopping cart
"""
from decimal import Decimal
from pydantic import BaseModel, Field

from storefront.schemas.common import MAX_INT


class CartItemAdd(BaseModel):
    """Schema for adding a product to the cart"""
    product_id: int = Field(..., gt=0, le=MAX_INT, description="Product ID")
    quantity: int = Field(..., gt=0, le=MAX_INT, description="Quantity to keep in the cart")


class CartItemUpdate(BaseModel):
    """Schema for changing the quantity of an existing cart line"""
    product_id: int = Field(..., gt=0, le=MAX_INT, description="Product ID")
    quantity: int = Field(..., gt=0, le=MAX_INT, description="New quantity (use DELETE to remove a line)")


class CartLineResponse(BaseModel):
    cart_item_id: int
    product_id: int
    product_name: str
    product_price: Decimal
    quantity: int
    subtotal: Decimal


class CartResponse(BaseModel):
    """Schema for cart contents response"""
    user_id: int
    items: list[CartLineResponse]
    total: Decimal
