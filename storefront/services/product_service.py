"""
Product Service - Business Logic Layer
"""
import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.repositories.product_repository import ProductRepository
from storefront.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    StockCheckResponse
)

logger = logging.getLogger(__name__)


class ProductInUseError(Exception):
    """Product is referenced by existing order lines"""
    pass


class ProductService:
    """Service layer for product business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = ProductRepository(db)

    def get_all_products(self, skip: int = 0, limit: int = 100) -> ProductListResponse:
        """Get all products with pagination"""
        products = self.repository.get_all(skip=skip, limit=limit)
        total = self.repository.count()

        return ProductListResponse(
            products=[ProductResponse.model_validate(p) for p in products],
            total=total
        )

    def get_product_by_id(self, product_id: int) -> Optional[ProductResponse]:
        """Get product by ID"""
        product = self.repository.get_by_id(product_id)
        if not product:
            return None
        return ProductResponse.model_validate(product)

    def create_product(self, product_data: ProductCreate) -> ProductResponse:
        """Create new product"""
        product = self.repository.create(product_data)
        logger.info("Created product %s", product.id)
        return ProductResponse.model_validate(product)

    def update_product(self, product_id: int, product_data: ProductUpdate) -> Optional[ProductResponse]:
        """
        Update existing product

        Raises:
            ValueError: If the update is empty or sets a required field to null
        """
        if not product_data.model_fields_set:
            raise ValueError("No valid fields provided for update.")
        product = self.repository.update(product_id, product_data)
        if not product:
            return None
        return ProductResponse.model_validate(product)

    def delete_product(self, product_id: int) -> bool:
        """
        Delete product

        Raises:
            ProductInUseError: If orders still reference the product
        """
        try:
            return self.repository.delete(product_id)
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Refusing to delete product %s: %s", product_id, e.orig)
            raise ProductInUseError(f"Product {product_id} is referenced by existing orders")

    def check_stock(self, product_id: int, required_quantity: int = 1) -> StockCheckResponse:
        """Check if product has sufficient stock"""
        product = self.repository.get_by_id(product_id)

        if not product:
            return StockCheckResponse(
                product_id=product_id,
                available=False,
                stock=0,
                message="Product not found"
            )

        available = product.stock >= required_quantity
        message = None if available else f"Insufficient stock. Available: {product.stock}, Required: {required_quantity}"

        return StockCheckResponse(
            product_id=product_id,
            available=available,
            stock=product.stock,
            message=message
        )
