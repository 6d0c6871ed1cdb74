"""
Product API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.database import get_db
from storefront.schemas.common import id_path
from storefront.services.product_service import ProductService, ProductInUseError
from storefront.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    StockCheckResponse
)

router = APIRouter(prefix="/products", tags=["products"])


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """Dependency to get ProductService instance"""
    return ProductService(db)


@router.get("", response_model=ProductListResponse, summary="Get all products")
def get_products(
    skip: int = Query(0, ge=0, description="Number of products to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of products to return"),
    service: ProductService = Depends(get_product_service)
):
    """
    Retrieve all products with pagination

    - **skip**: Number of products to skip (default: 0)
    - **limit**: Maximum number of products to return (default: 100, max: 1000)
    """
    return service.get_all_products(skip=skip, limit=limit)


@router.get("/{product_id}", response_model=ProductResponse, summary="Get product by ID")
def get_product(
    product_id: int = id_path("Product ID"),
    service: ProductService = Depends(get_product_service)
):
    """
    Retrieve a specific product by ID

    - **product_id**: Product ID
    """
    product = service.get_product_by_id(product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with id={product_id} not found"
        )
    return product


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create product",
    dependencies=[Depends(require_admin)]
)
def create_product(
    product_data: ProductCreate,
    service: ProductService = Depends(get_product_service)
):
    """
    Create a new product (admin only)

    - **name**: Product name (required)
    - **description**: Product description (optional)
    - **price**: Unit price (required, must be positive)
    - **stock**: Stock quantity (required, must be non-negative)
    - **image_url**: Product image URL (optional)
    """
    return service.create_product(product_data)


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update product",
    dependencies=[Depends(require_admin)]
)
def update_product(
    *,
    product_id: int = id_path("Product ID"),
    product_data: ProductUpdate,
    service: ProductService = Depends(get_product_service)
):
    """
    Update an existing product (admin only)

    Only name, description, price, stock and image_url can be changed;
    any other field is rejected.

    - **product_id**: Product ID
    """
    try:
        product = service.update_product(product_id, product_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with id={product_id} not found"
        )
    return product


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete product",
    dependencies=[Depends(require_admin)]
)
def delete_product(
    product_id: int = id_path("Product ID"),
    service: ProductService = Depends(get_product_service)
):
    """
    Delete a product (admin only)

    - **product_id**: Product ID
    """
    try:
        success = service.delete_product(product_id)
    except ProductInUseError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with id={product_id} not found"
        )
    return None


@router.get("/{product_id}/check", response_model=StockCheckResponse, summary="Check stock availability")
def check_stock(
    product_id: int = id_path("Product ID"),
    quantity: int = Query(1, ge=1, description="Required quantity"),
    service: ProductService = Depends(get_product_service)
):
    """
    Check if product has sufficient stock

    - **product_id**: Product ID
    - **quantity**: Required quantity (default: 1)
    """
    return service.check_stock(product_id, quantity)
