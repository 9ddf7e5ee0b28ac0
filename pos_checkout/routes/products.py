"""Product API routes (read-only catalog passthrough)"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..models.product import Product, ProductPage
from ..services.session import PosSession
from .deps import get_session

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductPage)
async def list_products(
    search: Optional[str] = Query(None, description="Name, SKU or barcode"),
    category_id: Optional[str] = Query(None, description="Filter by category"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    session: PosSession = Depends(get_session),
):
    """Browse the catalog"""
    return await session.catalog.list_products(
        search=search,
        category_id=category_id,
        page=page,
        limit=limit,
    )


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    session: PosSession = Depends(get_session),
):
    """Get a product by ID"""
    return await session.catalog.get_product(product_id)
