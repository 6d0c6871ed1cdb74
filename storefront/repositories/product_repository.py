"""
Product Repository - Data Access Layer
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from storefront.models.product import Product
from storefront.schemas.product import ProductCreate, ProductUpdate


# Columns an update may touch, mapped to their model attribute
UPDATABLE_FIELDS = {
    "name": Product.name,
    "description": Product.description,
    "price": Product.price,
    "stock": Product.stock,
    "image_url": Product.image_url,
}


class ProductRepository:
    """Repository for Product CRUD operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, skip: int = 0, limit: int = 100) -> List[Product]:
        """Get all products with pagination"""
        return self.db.query(Product).order_by(Product.id).offset(skip).limit(limit).all()

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID"""
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_by_ids(self, product_ids: List[int]) -> dict:
        """Get products keyed by ID; missing IDs are simply absent"""
        if not product_ids:
            return {}
        products = self.db.query(Product).filter(Product.id.in_(set(product_ids))).all()
        return {p.id: p for p in products}

    def create(self, product_data: ProductCreate) -> Product:
        """Create new product"""
        product = Product(**product_data.model_dump())
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update(self, product_id: int, product_data: ProductUpdate) -> Optional[Product]:
        """Update existing product"""
        product = self.get_by_id(product_id)
        if not product:
            return None

        # Update only provided fields
        update_data = product_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if field not in UPDATABLE_FIELDS:
                raise ValueError(f"Field '{field}' cannot be updated")
            if value is None and not Product.__table__.c[field].nullable:
                raise ValueError(f"Field '{field}' cannot be null")

        for field, value in update_data.items():
            setattr(product, UPDATABLE_FIELDS[field].key, value)

        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product_id: int) -> bool:
        """Delete product"""
        product = self.get_by_id(product_id)
        if not product:
            return False

        self.db.delete(product)
        self.db.commit()
        return True

    def decrement_stock_if_available(self, product_id: int, quantity: int) -> bool:
        """
        Conditionally subtract quantity from stock

        Issues a single ``UPDATE ... WHERE stock >= quantity`` inside the
        caller's transaction. Does not commit.

        Returns:
            True if a row was updated, False if the product is missing or
            has less stock than requested
        """
        updated = self.db.query(Product).filter(
            Product.id == product_id,
            Product.stock >= quantity
        ).update(
            {Product.stock: Product.stock - quantity},
            synchronize_session=False
        )
        return updated == 1

    def get_stock(self, product_id: int) -> Optional[int]:
        """Read the stock column directly, bypassing the identity map"""
        return self.db.query(Product.stock).filter(Product.id == product_id).scalar()

    def count(self) -> int:
        """Get total count of products"""
        return self.db.query(Product).count()
