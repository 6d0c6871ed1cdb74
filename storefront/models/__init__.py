"""
Models package
"""
from storefront.models.user import User
from storefront.models.product import Product
from storefront.models.cart import CartItem
from storefront.models.order import Order, OrderItem, OrderStatus, ORDER_STATUS_TRANSITIONS

__all__ = [
    "User",
    "Product",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "ORDER_STATUS_TRANSITIONS"
]
