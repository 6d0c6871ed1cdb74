"""
User Service - profile management
"""
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.models.user import User
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.user import UserUpdate
from storefront.services.auth_service import EmailAlreadyRegisteredError, hash_password


class UserService:
    """Service layer for user profiles"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = UserRepository(db)

    def get_user(self, user_id: int) -> Optional[User]:
        return self.repository.get_by_id(user_id)

    def update_user(self, user_id: int, user_data: UserUpdate) -> Optional[User]:
        """
        Update username, email and/or password

        Returns:
            Updated user or None if not found

        Raises:
            ValueError: If no field was provided
            EmailAlreadyRegisteredError: If the new email belongs to another user
        """
        updates = {k: v for k, v in user_data.model_dump(exclude_unset=True).items() if v is not None}
        if not updates:
            raise ValueError("No valid fields provided for update.")

        user = self.repository.get_by_id(user_id)
        if not user:
            return None

        changes = {}
        if "username" in updates:
            changes["username"] = updates["username"]
        if "email" in updates and updates["email"] != user.email:
            existing = self.repository.get_by_email(updates["email"])
            if existing and existing.id != user.id:
                raise EmailAlreadyRegisteredError("An account with this email already exists.")
            changes["email"] = updates["email"]
        if "password" in updates:
            changes["password_hash"] = hash_password(updates["password"])

        try:
            return self.repository.update(user, changes)
        except IntegrityError:
            # Email was taken by a concurrent request after the check above
            self.db.rollback()
            raise EmailAlreadyRegisteredError("An account with this email already exists.")

    def delete_user(self, user_id: int) -> bool:
        user = self.repository.get_by_id(user_id)
        if not user:
            return False
        self.repository.delete(user)
        return True
