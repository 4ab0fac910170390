# shopapi/services/filters.py
"""Translate search criteria into SQLAlchemy WHERE clauses.

Each present criterion adds one conjunct; no criteria gives ``true()``.
"""
import logging
from typing import Callable, List, Set

from sqlalchemy import and_, false, true
from sqlalchemy.sql.elements import ColumnElement

from ..database.entities import Order, Product
from ..models.order import OrderFilters
from ..models.product import ProductFilters

logger = logging.getLogger(__name__)


def _conjunction(clauses: List[ColumnElement[bool]]) -> ColumnElement[bool]:
    if not clauses:
        return true()
    return and_(*clauses)


def build_product_predicate(
    filters: ProductFilters,
    expand_category: Callable[[int], Set[int]],
    strict_category: bool = False,
) -> ColumnElement[bool]:
    """Predicate over Product for the given filters.

    ``expand_category`` maps a category id to the ids of that category and all
    of its descendants. When it returns nothing the category filter is dropped,
    or with ``strict_category`` the predicate matches no product at all.
    """
    clauses: List[ColumnElement[bool]] = []

    if filters.name is not None:
        clauses.append(Product.name.ilike(filters.name))

    if filters.min_price is not None:
        clauses.append(Product.price >= filters.min_price)

    if filters.max_price is not None:
        clauses.append(Product.price <= filters.max_price)

    if filters.category is not None:
        category_ids = expand_category(filters.category)
        if category_ids:
            clauses.append(Product.category_id.in_(category_ids))
        elif strict_category:
            logger.warning(f"category id={filters.category} not found, matching no products")
            clauses.append(false())
        else:
            logger.warning(f"category id={filters.category} not found, ignoring category filter")

    return _conjunction(clauses)


def build_order_predicate(filters: OrderFilters) -> ColumnElement[bool]:
    """Predicate over Order for the given filters"""
    clauses: List[ColumnElement[bool]] = []

    if filters.completed is not None:
        if filters.completed:
            clauses.append(Order.completed_at.is_not(None))
        else:
            clauses.append(Order.completed_at.is_(None))

    if filters.username is not None:
        clauses.append(Order.username == filters.username)

    return _conjunction(clauses)
