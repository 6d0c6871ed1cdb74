"""
Cart Repository - Data Access Layer
"""
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.models.cart import CartItem


class CartRepository:
    """Repository for a user's cart lines"""

    def __init__(self, db: Session):
        self.db = db

    def get_items(self, user_id: int) -> List[CartItem]:
        """Get the user's cart lines in insertion order"""
        return self.db.query(CartItem).filter(
            CartItem.user_id == user_id
        ).order_by(CartItem.id).all()

    def get_item(self, user_id: int, product_id: int) -> Optional[CartItem]:
        return self.db.query(CartItem).filter(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        ).first()

    def set_item(self, user_id: int, product_id: int, quantity: int) -> CartItem:
        """Insert a line or overwrite the quantity of an existing one"""
        item = self.get_item(user_id, product_id)
        if item:
            item.quantity = quantity
        else:
            item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
            self.db.add(item)
        try:
            self.db.commit()
        except IntegrityError:
            # Another request inserted the same (user, product) line first
            self.db.rollback()
            item = self.get_item(user_id, product_id)
            if item is None:
                raise
            item.quantity = quantity
            self.db.commit()
        self.db.refresh(item)
        return item

    def update_quantity(self, user_id: int, product_id: int, quantity: int) -> Optional[CartItem]:
        """Change the quantity of an existing line"""
        item = self.get_item(user_id, product_id)
        if not item:
            return None
        item.quantity = quantity
        self.db.commit()
        self.db.refresh(item)
        return item

    def remove_item(self, user_id: int, product_id: int) -> bool:
        item = self.get_item(user_id, product_id)
        if not item:
            return False
        self.db.delete(item)
        self.db.commit()
        return True

    def clear(self, user_id: int, commit: bool = True) -> int:
        """
        Delete every line of the user's cart

        Args:
            user_id: Cart owner
            commit: Set to False to leave the delete inside the caller's transaction

        Returns:
            Number of deleted lines
        """
        deleted = self.db.query(CartItem).filter(
            CartItem.user_id == user_id
        ).delete(synchronize_session=False)
        if commit:
            self.db.commit()
        return deleted
