"""
Cart Snapshot Reader
"""
from typing import List, NamedTuple

from sqlalchemy.orm import Session

from storefront.repositories.cart_repository import CartRepository


class CartLine(NamedTuple):
    product_id: int
    quantity: int


class CartSnapshotReader:
    """Reads a user's cart as plain (product_id, quantity) lines"""

    def __init__(self, db: Session):
        self.repository = CartRepository(db)

    def read(self, user_id: int) -> List[CartLine]:
        return [
            CartLine(product_id=item.product_id, quantity=item.quantity)
            for item in self.repository.get_items(user_id)
        ]
