"""
User Repository - Data Access Layer
"""
from typing import Optional
from sqlalchemy.orm import Session

from storefront.models.user import User


class UserRepository:
    """Repository for User CRUD operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.google_id == google_id).first()

    def create(
        self,
        username: str,
        email: str,
        password_hash: Optional[str] = None,
        is_admin: bool = False,
        google_id: Optional[str] = None,
        profile_pic: Optional[str] = None
    ) -> User:
        """Create new user"""
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            is_admin=is_admin,
            google_id=google_id,
            profile_pic=profile_pic
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user: User, changes: dict) -> User:
        """Apply already-validated column changes to a user"""
        for field, value in changes.items():
            setattr(user, field, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.commit()
