# shopapi/models/shared.py
import math
from typing import Generic, List, TypeVar

from pydantic import Field

from .base import ApiModel

T = TypeVar("T")


class Pagination(ApiModel):
    """Page requested by the client"""
    page_size: int = Field(10, ge=1)
    page_idx: int = Field(0, ge=0)

    @property
    def offset(self) -> int:
        return self.page_idx * self.page_size


class Page(ApiModel, Generic[T]):
    """One page of results"""
    content: List[T]
    page_idx: int
    page_size: int
    total_pages: int
    total_elements: int

    @classmethod
    def build(cls, content: List[T], pagination: Pagination, total_elements: int) -> "Page[T]":
        return cls(
            content=content,
            page_idx=pagination.page_idx,
            page_size=pagination.page_size,
            total_pages=math.ceil(total_elements / pagination.page_size),
            total_elements=total_elements,
        )
