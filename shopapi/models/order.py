# shopapi/models/order.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from .base import ApiModel, NonBlankStr
from .product import ProductOut
from .shared import Pagination


class AddressIn(ApiModel):
    street: NonBlankStr
    house: NonBlankStr
    postal_code: NonBlankStr
    city: NonBlankStr
    country: int


class AddressOut(ApiModel):
    id: int
    street: str
    house: str
    postal_code: str
    city: str
    country: int

    @classmethod
    def from_entity(cls, address) -> "AddressOut":
        return cls(
            id=address.id,
            street=address.street,
            house=address.house,
            postal_code=address.postal_code,
            city=address.city,
            country=address.country_id,
        )


class PaymentIn(ApiModel):
    payment_method: int


class PaymentOut(ApiModel):
    id: int
    payment_method: int
    amount: Decimal
    completed_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, payment) -> "PaymentOut":
        return cls(
            id=payment.id,
            payment_method=payment.payment_method_id,
            amount=payment.amount,
            completed_at=payment.completed_at,
        )


class OrderProductIn(ApiModel):
    product_id: int
    quantity: int = Field(ge=1)


class OrderIn(ApiModel):
    address: AddressIn
    payment: PaymentIn
    products: List[OrderProductIn] = Field(min_length=1)


class OrderProductOut(ApiModel):
    product: ProductOut
    price: Decimal
    quantity: int

    @classmethod
    def from_entity(cls, order_product) -> "OrderProductOut":
        return cls(
            product=ProductOut.from_entity(order_product.product),
            price=order_product.price,
            quantity=order_product.quantity,
        )


class OrderOut(ApiModel):
    id: int
    username: str
    address: AddressOut
    payment: PaymentOut
    ordered_at: datetime
    completed_at: Optional[datetime] = None
    price: Decimal
    order_products: List[OrderProductOut]

    @classmethod
    def from_entity(cls, order) -> "OrderOut":
        return cls(
            id=order.id,
            username=order.username,
            address=AddressOut.from_entity(order.address),
            payment=PaymentOut.from_entity(order.payment),
            ordered_at=order.ordered_at,
            completed_at=order.completed_at,
            price=order.price,
            order_products=[OrderProductOut.from_entity(op) for op in order.order_products],
        )


class OrderFilters(ApiModel):
    """completed=True selects orders with completed_at set, False the open ones"""
    completed: Optional[bool] = None
    username: Optional[NonBlankStr] = None


class OrdersQuery(OrderFilters, Pagination):
    """Query string of the order search: both the filters and the page"""


class CompletedAtUpdate(ApiModel):
    completed_at: datetime
