"""
Repositories package
"""
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.user_repository import UserRepository
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.order_repository import OrderRepository

__all__ = ["ProductRepository", "UserRepository", "CartRepository", "OrderRepository"]
