"""
Schemas package
"""
from storefront.schemas.product import (
    ProductBase,
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    StockCheckResponse
)
from storefront.schemas.user import (
    UserCreate,
    UserLogin,
    UserUpdate,
    UserResponse,
    TokenResponse,
    GoogleProfile
)
from storefront.schemas.cart import (
    CartItemAdd,
    CartItemUpdate,
    CartLineResponse,
    CartResponse
)
from storefront.schemas.order import (
    CheckoutLine,
    CheckoutRequest,
    OrderStatusUpdate,
    OrderItemResponse,
    OrderResponse,
    CheckoutErrorResponse,
    CheckoutErrorBody
)

__all__ = [
    "ProductBase",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductListResponse",
    "StockCheckResponse",
    "UserCreate",
    "UserLogin",
    "UserUpdate",
    "UserResponse",
    "TokenResponse",
    "GoogleProfile",
    "CartItemAdd",
    "CartItemUpdate",
    "CartLineResponse",
    "CartResponse",
    "CheckoutLine",
    "CheckoutRequest",
    "OrderStatusUpdate",
    "OrderItemResponse",
    "OrderResponse",
    "CheckoutErrorResponse",
    "CheckoutErrorBody"
]
