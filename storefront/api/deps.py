"""
Shared API dependencies: services and identity checks
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.models.user import User
from storefront.schemas.common import id_path
from storefront.services.auth_service import AuthService, InvalidTokenError

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to the user row it was issued for"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied.",
            headers={"WWW-Authenticate": "Bearer"}
        )

    try:
        user = AuthService(db).resolve_token(credentials.credentials)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token.",
            headers={"WWW-Authenticate": "Bearer"}
        )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found.",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Allow only users with the admin flag"""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden. Admin access required."
        )
    return current_user


def require_owner(
    user_id: int = id_path("User ID"),
    current_user: User = Depends(get_current_user)
) -> User:
    """Allow the user named in the path, or an admin"""
    if current_user.id != user_id and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not authorized to access this resource."
        )
    return current_user
