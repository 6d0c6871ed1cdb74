"""
Cart Service - Business Logic Layer
"""
from decimal import Decimal
from sqlalchemy.orm import Session

from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.schemas.cart import CartItemAdd, CartItemUpdate, CartLineResponse, CartResponse
from storefront.services.exceptions import InsufficientStockError, ProductNotFoundError


class CartItemNotFoundError(Exception):
    """Product is not in the user's cart"""
    pass


class CartService:
    """Service layer for a user's shopping cart"""

    def __init__(self, db: Session):
        self.repository = CartRepository(db)
        self.products = ProductRepository(db)

    def get_cart(self, user_id: int) -> CartResponse:
        """Get cart lines priced at current product prices"""
        lines = []
        for item in self.repository.get_items(user_id):
            price = Decimal(item.product.price)
            lines.append(CartLineResponse(
                cart_item_id=item.id,
                product_id=item.product_id,
                product_name=item.product.name,
                product_price=price,
                quantity=item.quantity,
                subtotal=price * item.quantity
            ))

        total = sum((line.subtotal for line in lines), Decimal("0.00"))
        return CartResponse(user_id=user_id, items=lines, total=total)

    def add_item(self, user_id: int, item_data: CartItemAdd) -> CartResponse:
        """
        Put a product in the cart with the given quantity

        An existing line for the same product has its quantity replaced.

        Raises:
            ProductNotFoundError: If product does not exist
            InsufficientStockError: If stock is below the quantity
        """
        self._ensure_stock(item_data.product_id, item_data.quantity)
        self.repository.set_item(user_id, item_data.product_id, item_data.quantity)
        return self.get_cart(user_id)

    def update_item(self, user_id: int, item_data: CartItemUpdate) -> CartResponse:
        """
        Change the quantity of a line already in the cart

        Raises:
            ProductNotFoundError: If product does not exist
            InsufficientStockError: If stock is below the quantity
            CartItemNotFoundError: If the product is not in the cart
        """
        self._ensure_stock(item_data.product_id, item_data.quantity)
        item = self.repository.update_quantity(user_id, item_data.product_id, item_data.quantity)
        if not item:
            raise CartItemNotFoundError("Item not found in cart.")
        return self.get_cart(user_id)

    def remove_item(self, user_id: int, product_id: int) -> CartResponse:
        """
        Remove one product from the cart

        Raises:
            CartItemNotFoundError: If the product is not in the cart
        """
        if not self.repository.remove_item(user_id, product_id):
            raise CartItemNotFoundError("Item not found in cart.")
        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> CartResponse:
        self.repository.clear(user_id)
        return self.get_cart(user_id)

    def _ensure_stock(self, product_id: int, quantity: int) -> None:
        product = self.products.get_by_id(product_id)
        if not product:
            raise ProductNotFoundError(f"Product {product_id} not found", product_id=product_id)
        if product.stock < quantity:
            raise InsufficientStockError(
                f"Insufficient stock for requested quantity. Available: {product.stock}, Requested: {quantity}",
                product_id=product_id,
                available=product.stock,
                requested=quantity
            )
