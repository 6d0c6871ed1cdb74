"""
Price Authority - current authoritative unit prices
"""
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.repositories.product_repository import ProductRepository
from storefront.services.exceptions import ProductNotFoundError


class PriceAuthority:
    """Looks up unit prices from the product table, never from the client"""

    def __init__(self, db: Session):
        self.repository = ProductRepository(db)

    def current_price(self, product_id: int) -> Decimal:
        """
        Get the price of a product at this instant

        Raises:
            ProductNotFoundError: If the product does not exist
        """
        product = self.repository.get_by_id(product_id)
        if not product:
            raise ProductNotFoundError(f"Product {product_id} not found", product_id=product_id)
        return Decimal(product.price)
