"""
Cart API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.database import get_db
from storefront.models.user import User
from storefront.schemas.common import id_path
from storefront.schemas.cart import CartItemAdd, CartItemUpdate, CartResponse
from storefront.services.cart_service import CartService, CartItemNotFoundError
from storefront.services.exceptions import InsufficientStockError, ProductNotFoundError

router = APIRouter(prefix="/cart", tags=["cart"])


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    """Dependency to get CartService instance"""
    return CartService(db)


@router.get("", response_model=CartResponse, summary="Get cart")
def get_cart(
    current_user: User = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    """Current cart lines with subtotals and total at today's prices"""
    return service.get_cart(current_user.id)


@router.post("", response_model=CartResponse, summary="Add item to cart")
def add_item(
    item_data: CartItemAdd,
    current_user: User = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    """
    Add a product to the cart, or replace the quantity of an existing line

    - **product_id**: Product ID (required)
    - **quantity**: Quantity (required, must be positive)
    """
    try:
        return service.add_item(current_user.id, item_data)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except InsufficientStockError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)


@router.patch("", response_model=CartResponse, summary="Update cart item quantity")
def update_item(
    item_data: CartItemUpdate,
    current_user: User = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    """
    Change the quantity of a product already in the cart

    A quantity of zero is rejected; remove the line with DELETE instead.
    """
    try:
        return service.update_item(current_user.id, item_data)
    except (ProductNotFoundError, CartItemNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)


@router.delete("/{product_id}", response_model=CartResponse, summary="Remove item from cart")
def remove_item(
    product_id: int = id_path("Product ID"),
    current_user: User = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    try:
        return service.remove_item(current_user.id, product_id)
    except CartItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("", response_model=CartResponse, summary="Clear cart")
def clear_cart(
    current_user: User = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    return service.clear_cart(current_user.id)
