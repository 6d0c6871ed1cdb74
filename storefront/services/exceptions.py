"""
Checkout error taxonomy
"""
from typing import Optional


class CheckoutError(Exception):
    """Base exception for checkout failures"""

    code = "checkout_error"

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        product_id: Optional[int] = None,
        available: Optional[int] = None,
        requested: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.product_id = product_id
        self.available = available
        self.requested = requested

    def to_dict(self) -> dict:
        """Structured detail for API responses; unset fields are omitted"""
        detail = {"code": self.code, "message": self.message}
        for key in ("line", "product_id", "available", "requested"):
            value = getattr(self, key)
            if value is not None:
                detail[key] = value
        return detail


class CheckoutValidationError(CheckoutError):
    """Malformed or empty checkout input"""
    code = "empty_cart"


class StockError(CheckoutError):
    """A line names an unknown product or asks for more than is in stock"""
    code = "insufficient_stock"


class ProductNotFoundError(StockError):
    """Product does not exist"""
    code = "product_not_found"


class InsufficientStockError(StockError):
    """Not enough stock for the requested quantity"""
    code = "insufficient_stock"


class StockConflictError(CheckoutError):
    """Stock was consumed by a concurrent checkout after validation"""
    code = "stock_conflict"


class CheckoutServerError(CheckoutError):
    """Storage or transaction failure; nothing was committed"""
    code = "checkout_failed"
