"""
Order Repository - Data Access Layer
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

from storefront.models.order import Order, OrderItem


class OrderRepository:
    """Repository for Order CRUD operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID"""
        return self.db.query(Order).filter(Order.id == order_id).first()

    def get_for_user(self, order_id: int, user_id: int) -> Optional[Order]:
        """Get order by ID only if it belongs to the user"""
        return self.db.query(Order).filter(
            Order.id == order_id,
            Order.user_id == user_id
        ).first()

    def get_by_user(self, user_id: int) -> List[Order]:
        """Get a user's orders, newest first"""
        return self.db.query(Order).filter(
            Order.user_id == user_id
        ).order_by(desc(Order.created_at), desc(Order.id)).all()

    def add(self, user_id: int, total_amount, status: str, lines: List[dict]) -> Order:
        """
        Stage an order header and its lines

        Flushes so the order gets its ID, but does not commit; the caller
        owns the transaction.

        Args:
            user_id: Owning user
            total_amount: Order total
            status: Initial status
            lines: Dicts with product_id, product_name, quantity, price_at_order

        Returns:
            The pending order
        """
        order = Order(user_id=user_id, total_amount=total_amount, status=status)
        order.items = [OrderItem(**line) for line in lines]
        self.db.add(order)
        self.db.flush()
        return order

    def update_status(self, order: Order, new_status: str) -> Order:
        """Update order status"""
        order.status = new_status
        self.db.commit()
        self.db.refresh(order)
        return order
