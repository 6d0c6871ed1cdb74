"""
Services package
"""
from storefront.services.auth_service import AuthService
from storefront.services.cart_service import CartService
from storefront.services.checkout_service import CheckoutOrchestrator, CheckoutResult
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService

__all__ = [
    "AuthService",
    "CartService",
    "CheckoutOrchestrator",
    "CheckoutResult",
    "OrderService",
    "ProductService",
    "UserService"
]
