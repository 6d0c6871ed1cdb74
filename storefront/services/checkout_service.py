"""
Checkout Service - turns cart lines into a committed order
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type, before_sleep_log

from storefront.config import settings
from storefront.models.order import Order, OrderStatus
from storefront.models.product import Product
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.services.cart_snapshot import CartLine, CartSnapshotReader
from storefront.services.exceptions import (
    CheckoutError,
    CheckoutValidationError,
    CheckoutServerError,
    InsufficientStockError,
    ProductNotFoundError,
    StockConflictError
)
from storefront.services.price_authority import PriceAuthority
from storefront.services.stock_ledger import Reservation, StockLedger

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass
class CheckoutResult:
    """Outcome of a checkout: exactly one of ``order`` or ``error`` is set"""
    order: Optional[Order] = None
    error: Optional[CheckoutError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CheckoutOrchestrator:
    """Coordinates stock, pricing, order writing and cart clearing in one transaction"""

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)
        self.orders = OrderRepository(db)
        self.carts = CartRepository(db)
        self.cart_reader = CartSnapshotReader(db)
        self.price_authority = PriceAuthority(db)
        self.stock_ledger = StockLedger(db)

    def checkout(self, user_id: int, lines: Optional[Sequence[CartLine]] = None) -> CheckoutResult:
        """
        Place an order for the user

        Steps:
        1. Reject empty input
        2. Validate every line against current product state
        3. Compute the total from authoritative prices
        4. Insert order + lines, reserve stock, clear the cart
        5. Commit, or roll everything back on any failure

        Args:
            user_id: Authenticated user placing the order
            lines: (product_id, quantity) pairs; None means "use the user's cart"

        Returns:
            CheckoutResult with the committed order or the reason it failed.
            Errors are reported in the result, not raised.
        """
        if lines is not None and len(lines) == 0:
            return CheckoutResult(error=self._empty_cart())

        try:
            order = self._place_order(user_id, list(lines) if lines is not None else None)
        except CheckoutError as e:
            logger.info("Checkout rejected for user %s: %s", user_id, e.message)
            return CheckoutResult(error=e)
        except Exception:
            logger.exception("Checkout failed for user %s", user_id)
            return CheckoutResult(error=CheckoutServerError(
                "Order could not be placed. Your cart was not changed, please try again."
            ))

        logger.info("Order %s placed by user %s, total %s", order.id, user_id, order.total_amount)
        return CheckoutResult(order=order)

    @retry(
        stop=stop_after_attempt(settings.MAX_RETRIES),
        wait=wait_exponential(multiplier=settings.RETRY_DELAY, max=2),
        retry=retry_if_exception_type(OperationalError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    def _place_order(self, user_id: int, lines: Optional[List[CartLine]]) -> Order:
        """One transactional attempt; retried as a whole on transient database errors"""
        try:
            if lines is None:
                lines = self.cart_reader.read(user_id)
            if not lines:
                raise self._empty_cart()

            requested, products = self._check_stock(lines)

            unit_prices = {
                product_id: self.price_authority.current_price(product_id)
                for product_id in requested
            }
            total = sum(
                (unit_prices[line.product_id] * line.quantity for line in lines),
                Decimal("0")
            ).quantize(CENT, rounding=ROUND_HALF_UP)

            order = self.orders.add(
                user_id=user_id,
                total_amount=total,
                status=OrderStatus.PROCESSING.value,
                lines=[
                    {
                        "product_id": line.product_id,
                        "product_name": products[line.product_id].name,
                        "quantity": line.quantity,
                        "price_at_order": unit_prices[line.product_id]
                    }
                    for line in lines
                ]
            )

            # Ascending id order keeps row locks consistent across concurrent checkouts
            for product_id in sorted(requested):
                quantity = requested[product_id]
                outcome = self.stock_ledger.reserve(product_id, quantity)
                if outcome is not Reservation.OK:
                    available = self.stock_ledger.available(product_id) or 0
                    raise StockConflictError(
                        f"Stock for product {product_id} changed during checkout. "
                        f"Available: {available}, Requested: {quantity}",
                        line=self._first_line(lines, product_id),
                        product_id=product_id,
                        available=available,
                        requested=quantity
                    )

            self.carts.clear(user_id, commit=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return order

    def _check_stock(self, lines: List[CartLine]) -> Tuple[Dict[int, int], Dict[int, Product]]:
        """
        Validate lines against current product state

        Quantities for a product listed on several lines are summed before
        comparing with its stock.

        Returns:
            Total requested quantity per product ID, and the loaded products

        Raises:
            ProductNotFoundError: If a line names an unknown product
            InsufficientStockError: If a product has less stock than requested
        """
        requested: Dict[int, int] = {}
        for line in lines:
            requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity

        products = self.products.get_by_ids(list(requested))

        for index, line in enumerate(lines):
            product = products.get(line.product_id)
            if product is None:
                raise ProductNotFoundError(
                    f"Product {line.product_id} not found",
                    line=index,
                    product_id=line.product_id,
                    available=0,
                    requested=line.quantity
                )
            wanted = requested[line.product_id]
            if product.stock < wanted:
                raise InsufficientStockError(
                    f"Not enough stock for {product.name}. "
                    f"Available: {product.stock}, Requested: {wanted}",
                    line=index,
                    product_id=product.id,
                    available=product.stock,
                    requested=wanted
                )

        return requested, products

    @staticmethod
    def _first_line(lines: List[CartLine], product_id: int) -> Optional[int]:
        for index, line in enumerate(lines):
            if line.product_id == product_id:
                return index
        return None

    @staticmethod
    def _empty_cart() -> CheckoutValidationError:
        return CheckoutValidationError("Cannot create order: your cart is empty.")
