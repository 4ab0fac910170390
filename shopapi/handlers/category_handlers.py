# shopapi/handlers/category_handlers.py
from typing import List

from fastapi import APIRouter, Response, status

from ..models.category import CategoryIn, CategoryOut, CategoryPatch
from ..services.category_service import CategoryService
from ..utils.security import require_access
from .base_handler import DatabaseDep, IdentityDep

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
async def list_categories(identity: IdentityDep, db: DatabaseDep):
    """All categories"""
    require_access(identity, "list_categories")
    return await CategoryService(db).get_all_categories()


@router.post("", response_model=CategoryOut)
async def create_category(category: CategoryIn, identity: IdentityDep, db: DatabaseDep):
    """Create a category; 404 unknown parent, 409 duplicated name"""
    require_access(identity, "create_category")
    return await CategoryService(db).add_category(category)


@router.patch("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_category(category_id: int, patch: CategoryPatch,
                          identity: IdentityDep, db: DatabaseDep):
    """Rename or move a category; 400 when the move would create a cycle"""
    require_access(identity, "update_category")
    await CategoryService(db).update_category(category_id, patch)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, identity: IdentityDep, db: DatabaseDep):
    """Delete a category; 409 while products or subcategories use it"""
    require_access(identity, "delete_category")
    await CategoryService(db).delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
