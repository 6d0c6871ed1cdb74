"""
Order API endpoints
"""
from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from storefront.api.deps import get_current_user, require_admin
from storefront.database import get_db
from storefront.models.user import User
from storefront.schemas.common import id_path
from storefront.services.cart_snapshot import CartLine
from storefront.services.checkout_service import CheckoutOrchestrator
from storefront.services.exceptions import (
    CheckoutValidationError,
    StockConflictError,
    StockError
)
from storefront.services.order_service import OrderService, InvalidStatusTransitionError
from storefront.schemas.order import (
    CheckoutRequest,
    CheckoutErrorBody,
    OrderStatusUpdate,
    OrderResponse
)

router = APIRouter(prefix="/orders", tags=["orders"])


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency to get OrderService instance"""
    return OrderService(db)


def get_checkout(db: Session = Depends(get_db)) -> CheckoutOrchestrator:
    """Dependency to get CheckoutOrchestrator instance"""
    return CheckoutOrchestrator(db)


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Check out",
    responses={
        400: {"model": CheckoutErrorBody, "description": "Empty cart"},
        409: {"model": CheckoutErrorBody, "description": "Unknown product or not enough stock"},
        500: {"model": CheckoutErrorBody, "description": "Order could not be stored"}
    }
)
def create_order(
    checkout_data: Optional[CheckoutRequest] = Body(None),
    current_user: User = Depends(get_current_user),
    checkout: CheckoutOrchestrator = Depends(get_checkout)
):
    """
    Turn the cart into an order

    Process:
    1. Validate every line against current stock
    2. Price lines at current product prices (client prices are ignored)
    3. Save order and lines, decrement stock, empty the cart
    4. Commit everything, or nothing

    - **items**: Optional explicit lines; omit to check out the stored cart
    """
    lines = None
    if checkout_data is not None and checkout_data.items is not None:
        lines = [CartLine(product_id=i.product_id, quantity=i.quantity) for i in checkout_data.items]

    result = checkout.checkout(current_user.id, lines)
    if result.ok:
        return OrderResponse.model_validate(result.order)

    error = result.error
    if isinstance(error, CheckoutValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, (StockError, StockConflictError)):
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    raise HTTPException(status_code=status_code, detail=error.to_dict())


@router.get("", response_model=List[OrderResponse], summary="Get my orders")
def get_orders(
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service)
):
    """Orders placed by the caller, newest first"""
    return service.get_orders_for_user(current_user.id)


@router.get("/{order_id}", response_model=OrderResponse, summary="Get order by ID")
def get_order(
    order_id: int = id_path("Order ID"),
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service)
):
    """
    Retrieve one of the caller's orders

    - **order_id**: Order ID
    """
    order = service.get_order_for_user(order_id, current_user.id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found or you do not have permission to view it."
        )
    return order


@router.patch(
    "/{order_id}/status",
    response_model=OrderResponse,
    summary="Update order status",
    dependencies=[Depends(require_admin)]
)
def update_order_status(
    *,
    order_id: int = id_path("Order ID"),
    status_data: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service)
):
    """
    Update order status (admin only)

    - **order_id**: Order ID
    - **status**: Processing -> Completed or Processing -> Cancelled
    """
    try:
        order = service.update_order_status(order_id, status_data.status)
    except InvalidStatusTransitionError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order with id={order_id} not found"
        )
    return order
