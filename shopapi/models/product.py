# shopapi/models/product.py
from decimal import Decimal
from typing import Optional

from pydantic import Field

from .base import ApiModel, NonBlankStr
from .shared import Pagination


class ProductIn(ApiModel):
    name: NonBlankStr
    description: NonBlankStr
    price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    category: int


class ProductPatch(ApiModel):
    """Fields left as None are not changed"""
    name: Optional[NonBlankStr] = None
    description: Optional[NonBlankStr] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    category: Optional[int] = None


class ProductFilters(ApiModel):
    """Optional search criteria, combined with AND"""
    name: Optional[NonBlankStr] = None
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, ge=0)
    category: Optional[int] = None


class ProductsQuery(ProductFilters, Pagination):
    """Query string of the product search: both the filters and the page"""


class ProductOut(ApiModel):
    id: int
    name: str
    price: Decimal
    category: int

    @classmethod
    def from_entity(cls, product) -> "ProductOut":
        return cls(id=product.id, name=product.name, price=product.price, category=product.category_id)


class ProductDetailsOut(ProductOut):
    description: str

    @classmethod
    def from_entity(cls, product) -> "ProductDetailsOut":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            category=product.category_id,
        )
