# shopapi/handlers/product_handlers.py
from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from ..models.product import ProductDetailsOut, ProductIn, ProductOut, ProductPatch, ProductsQuery
from ..models.shared import Page
from ..services.product_service import ProductService
from ..utils.security import require_access
from .base_handler import DatabaseDep, IdentityDep

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=Page[ProductOut])
async def list_products(query: Annotated[ProductsQuery, Query()],
                        identity: IdentityDep, db: DatabaseDep):
    """Page of active products, filtered by name, price range and category tree"""
    require_access(identity, "list_products")
    return await ProductService(db).search_products(filters=query, pagination=query)


@router.get("/{product_id}", response_model=ProductDetailsOut)
async def get_product(product_id: int, identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "get_product")
    return await ProductService(db).get_product(product_id)


@router.post("", response_model=ProductDetailsOut)
async def create_product(product: ProductIn, identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "create_product")
    return await ProductService(db).add_product(product)


@router.patch("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_product(product_id: int, patch: ProductPatch,
                         identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "update_product")
    await ProductService(db).update_product(product_id, patch)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, identity: IdentityDep, db: DatabaseDep):
    """Delete a product by marking it inactive"""
    require_access(identity, "delete_product")
    await ProductService(db).delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
