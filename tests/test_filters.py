# tests/test_filters.py
import logging
from datetime import datetime
from decimal import Decimal
from functools import partial

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from shopapi.database.entities import (
    Address,
    Base,
    Category,
    Country,
    Order,
    Payment,
    PaymentMethod,
    Product,
)
from shopapi.models.order import OrderFilters
from shopapi.models.product import ProductFilters
from shopapi.services.filters import build_order_predicate, build_product_predicate
from shopapi.utils.category_tree import expand_category_tree

CATEGORIES = {1: None, 2: 1, 3: 2, 4: None}

# id, name, price, category
PRODUCTS = [
    (1, "Red Shirt", "10.00", 1),
    (2, "Blue Shirt", "25.50", 2),
    (3, "Green Hat", "5.00", 3),
    (4, "shirt", "40.00", 4),
    (5, "Socks", "2.99", 4),
    (6, "Belt", "9.99", 4),
    (7, "Scarf", "25.51", 4),
]


@pytest.fixture(scope="module")
def session():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        # parents first
        for category_id in sorted(CATEGORIES):
            session.add(Category(id=category_id, name=f"category {category_id}",
                                 parent_id=CATEGORIES[category_id]))
            session.flush()
        for product_id, name, price, category_id in PRODUCTS:
            session.add(Product(id=product_id, active=True, name=name, description=name,
                                price=Decimal(price), category_id=category_id))

        session.add(Country(id=1, name="Nowhere", active=True))
        session.add(PaymentMethod(id=1, name="cash", description="cash", active=True))
        for order_id, username, completed_at in [
            (1, "alice", None),
            (2, "alice", datetime(2024, 1, 2)),
            (3, "bob", None),
        ]:
            session.add(Order(
                id=order_id,
                username=username,
                address=Address(street="s", house="1", postal_code="0", city="c", country_id=1),
                payment=Payment(payment_method_id=1, amount=Decimal("1.00")),
                ordered_at=datetime(2024, 1, 1),
                completed_at=completed_at,
                price=Decimal("1.00"),
            ))
        session.commit()
        yield session
    engine.dispose()


def expand(category_id):
    return expand_category_tree(category_id, CATEGORIES)


def product_ids(session, predicate):
    return set(session.scalars(select(Product.id).where(predicate)))


def order_ids(session, predicate):
    return set(session.scalars(select(Order.id).where(predicate)))


def test_no_filters_match_everything(session):
    predicate = build_product_predicate(ProductFilters(), expand)

    assert product_ids(session, predicate) == {1, 2, 3, 4, 5, 6, 7}


def test_name_is_case_insensitive_pattern(session):
    assert product_ids(session, build_product_predicate(ProductFilters(name="SHIRT"), expand)) == {4}
    assert product_ids(session, build_product_predicate(ProductFilters(name="%shirt%"), expand)) \
        == {1, 2, 4}


def test_price_bounds_are_inclusive(session):
    filters = ProductFilters(min_price=Decimal("5.00"), max_price=Decimal("25.50"))

    assert product_ids(session, build_product_predicate(filters, expand)) == {1, 2, 3, 6}


def test_price_bounds_exclude_one_cent_outside(session):
    filters = ProductFilters(min_price=Decimal("10.00"), max_price=Decimal("25.50"))

    # 9.99 and 25.51 sit just outside the range
    assert product_ids(session, build_product_predicate(filters, expand)) == {1, 2}


def test_category_includes_descendants(session):
    assert product_ids(session, build_product_predicate(ProductFilters(category=1), expand)) \
        == {1, 2, 3}
    assert product_ids(session, build_product_predicate(ProductFilters(category=2), expand)) \
        == {2, 3}


def test_filters_are_combined_with_and(session):
    filters = ProductFilters(name="%shirt%", max_price=Decimal("30"), category=1)

    assert product_ids(session, build_product_predicate(filters, expand)) == {1, 2}


def test_contradictory_bounds_match_nothing(session):
    filters = ProductFilters(min_price=Decimal("30"), max_price=Decimal("10"))

    assert product_ids(session, build_product_predicate(filters, expand)) == set()


def test_unknown_category_is_ignored(session, caplog):
    with caplog.at_level(logging.WARNING, logger="shopapi.services.filters"):
        predicate = build_product_predicate(ProductFilters(category=99), expand)

    assert product_ids(session, predicate) == {1, 2, 3, 4, 5, 6, 7}
    assert "category id=99 not found" in caplog.text


def test_unknown_category_in_strict_mode_matches_nothing(session):
    predicate = build_product_predicate(ProductFilters(category=99), expand, strict_category=True)

    assert product_ids(session, predicate) == set()


def test_expander_is_only_called_for_category_filter():
    calls = []

    def recording_expand(category_id):
        calls.append(category_id)
        return {category_id}

    build_product_predicate(ProductFilters(name="x"), recording_expand)
    build_product_predicate(ProductFilters(category=4), recording_expand)

    assert calls == [4]


def test_expansion_over_snapshot(session):
    snapshot = dict(session.execute(select(Category.id, Category.parent_id)).all())
    expand_snapshot = partial(expand_category_tree, parent_by_id=snapshot)

    assert product_ids(session, build_product_predicate(ProductFilters(category=2), expand_snapshot)) \
        == {2, 3}


def test_order_predicates(session):
    assert order_ids(session, build_order_predicate(OrderFilters())) == {1, 2, 3}
    assert order_ids(session, build_order_predicate(OrderFilters(completed=True))) == {2}
    assert order_ids(session, build_order_predicate(OrderFilters(completed=False))) == {1, 3}
    assert order_ids(session, build_order_predicate(OrderFilters(username="alice"))) == {1, 2}
    assert order_ids(session, build_order_predicate(
        OrderFilters(completed=False, username="alice"))) == {1}
