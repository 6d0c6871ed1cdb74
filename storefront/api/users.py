"""
User profile API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.api.deps import require_owner
from storefront.database import get_db
from storefront.schemas.common import id_path
from storefront.schemas.user import UserUpdate, UserResponse
from storefront.services.auth_service import EmailAlreadyRegisteredError
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_owner)])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency to get UserService instance"""
    return UserService(db)


@router.get("/{user_id}", response_model=UserResponse, summary="Get user profile")
def get_user(
    user_id: int = id_path("User ID"),
    service: UserService = Depends(get_user_service)
):
    user = service.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found."
        )
    return user


@router.patch("/{user_id}", response_model=UserResponse, summary="Update user profile")
def update_user(
    *,
    user_id: int = id_path("User ID"),
    user_data: UserUpdate,
    service: UserService = Depends(get_user_service)
):
    """
    Update username, email and/or password

    - **user_id**: User ID (must be the caller unless the caller is an admin)
    """
    try:
        user = service.update_user(user_id, user_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found."
        )
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete user")
def delete_user(
    user_id: int = id_path("User ID"),
    service: UserService = Depends(get_user_service)
):
    if not service.delete_user(user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found."
        )
    return None
