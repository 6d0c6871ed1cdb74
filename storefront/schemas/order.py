"""
Pydantic schemas for checkout and orders
"""
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Literal
from datetime import datetime

from storefront.schemas.common import MAX_INT


class CheckoutLine(BaseModel):
    """One requested (product, quantity) line"""
    product_id: int = Field(..., gt=0, le=MAX_INT, description="Product ID")
    quantity: int = Field(..., gt=0, le=MAX_INT, description="Quantity to order")
    price: Optional[Decimal] = Field(
        None,
        description="Price shown to the client; ignored when computing the order total"
    )


class CheckoutRequest(BaseModel):
    """
    Schema for creating an order

    When ``items`` is omitted the current contents of the caller's cart are
    checked out.
    """
    items: Optional[list[CheckoutLine]] = Field(None, description="Lines to check out")


class OrderStatusUpdate(BaseModel):
    """Schema for updating order status"""
    status: Literal['Processing', 'Completed', 'Cancelled'] = Field(
        ...,
        description="Order status"
    )


class OrderItemResponse(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    price_at_order: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Schema for order response"""
    id: int
    user_id: int
    total_amount: Decimal
    status: str
    created_at: datetime
    items: list[OrderItemResponse]

    model_config = ConfigDict(from_attributes=True)


class CheckoutErrorResponse(BaseModel):
    """Structured detail returned when checkout is rejected"""
    code: str
    message: str
    line: Optional[int] = None
    product_id: Optional[int] = None
    available: Optional[int] = None
    requested: Optional[int] = None


class CheckoutErrorBody(BaseModel):
    """Body of a rejected checkout response"""
    detail: CheckoutErrorResponse
