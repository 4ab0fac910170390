# shopapi/models/category.py
from typing import Optional

from .base import ApiModel, NonBlankStr


class CategoryIn(ApiModel):
    name: NonBlankStr
    parent_category: Optional[int] = None


class CategoryPatch(ApiModel):
    """Fields left as None are not changed"""
    name: Optional[NonBlankStr] = None
    parent_category: Optional[int] = None


class CategoryOut(ApiModel):
    id: int
    name: str
    parent_category: Optional[int] = None

    @classmethod
    def from_entity(cls, category) -> "CategoryOut":
        return cls(id=category.id, name=category.name, parent_category=category.parent_id)
