"""
Order Service - order history and status changes
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from storefront.models.order import OrderStatus, ORDER_STATUS_TRANSITIONS
from storefront.repositories.order_repository import OrderRepository
from storefront.schemas.order import OrderResponse

logger = logging.getLogger(__name__)


class InvalidStatusTransitionError(Exception):
    """Requested status change is not allowed from the current status"""
    pass


class OrderService:
    """Service layer for reading orders and moving them through their statuses"""

    def __init__(self, db: Session):
        self.repository = OrderRepository(db)

    def get_orders_for_user(self, user_id: int) -> List[OrderResponse]:
        """Get a user's orders, newest first"""
        orders = self.repository.get_by_user(user_id)
        return [OrderResponse.model_validate(o) for o in orders]

    def get_order_for_user(self, order_id: int, user_id: int) -> Optional[OrderResponse]:
        """Get an order only if the user owns it"""
        order = self.repository.get_for_user(order_id, user_id)
        if not order:
            return None
        return OrderResponse.model_validate(order)

    def update_order_status(self, order_id: int, new_status: str) -> Optional[OrderResponse]:
        """
        Update order status

        Args:
            order_id: Order ID
            new_status: New status value

        Returns:
            Updated order or None if not found

        Raises:
            InvalidStatusTransitionError: If the order is already in a terminal status
        """
        order = self.repository.get_by_id(order_id)
        if not order:
            return None

        current = OrderStatus(order.status)
        target = OrderStatus(new_status)
        if target == current:
            return OrderResponse.model_validate(order)
        if target not in ORDER_STATUS_TRANSITIONS[current]:
            raise InvalidStatusTransitionError(
                f"Cannot change order {order_id} from {current.value} to {target.value}"
            )

        order = self.repository.update_status(order, target.value)
        logger.info("Order %s status changed: %s -> %s", order.id, current.value, target.value)
        return OrderResponse.model_validate(order)
