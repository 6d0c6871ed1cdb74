"""
Stock Ledger - authoritative per-product inventory counts
"""
import enum

from sqlalchemy.orm import Session

from storefront.repositories.product_repository import ProductRepository


class Reservation(enum.Enum):
    OK = "ok"
    INSUFFICIENT_STOCK = "insufficient_stock"
    PRODUCT_NOT_FOUND = "product_not_found"


class StockLedger:
    """Reserves stock inside the caller's open transaction"""

    def __init__(self, db: Session):
        self.repository = ProductRepository(db)

    def reserve(self, product_id: int, quantity: int) -> Reservation:
        """
        Decrement stock if at least ``quantity`` units are available

        The availability check and the decrement are one conditional
        UPDATE, so concurrent reservations for the same product cannot
        drive stock below zero. Nothing is committed here.

        Args:
            product_id: Product ID
            quantity: Units to take (must be positive)

        Returns:
            Reservation outcome
        """
        if quantity <= 0:
            raise ValueError(f"Reservation quantity must be positive, got {quantity}")

        if self.repository.decrement_stock_if_available(product_id, quantity):
            return Reservation.OK

        # No row matched: find out whether the product is gone or just short
        if self.repository.get_stock(product_id) is None:
            return Reservation.PRODUCT_NOT_FOUND
        return Reservation.INSUFFICIENT_STOCK

    def available(self, product_id: int):
        """Current stock as seen by this transaction, or None if the product is missing"""
        return self.repository.get_stock(product_id)
