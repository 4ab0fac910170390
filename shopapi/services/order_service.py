# shopapi/services/order_service.py
import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..constants import ORDER_PRIVILEGED_ROLES, Roles
from ..database.entities import Address, Order, OrderProduct, Payment, Product
from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models.order import AddressIn, CompletedAtUpdate, OrderFilters, OrderIn, OrderOut
from ..models.shared import Page, Pagination
from ..utils.clock import to_utc_naive, utc_now
from ..utils.security import Identity, has_any_role
from .country_service import CountryService
from .filters import build_order_predicate
from .payment_method_service import PaymentMethodService


class OrderService:
    def __init__(self, db):
        self.db = db
        self.country_service = CountryService(db)
        self.payment_method_service = PaymentMethodService(db)
        self.logger = logging.getLogger(__name__)

    async def _find_order(self, session: AsyncSession, order_id: int) -> Order:
        order = await session.get(Order, order_id)
        if order is None:
            raise NotFoundError.order(order_id)
        return order

    async def _find_visible_order(self, session: AsyncSession, identity: Identity,
                                  order_id: int, *privileged_roles: str) -> Order:
        """Any order for privileged users, otherwise only the user's own"""
        if has_any_role(identity, privileged_roles):
            return await self._find_order(session, order_id)

        order = await session.scalar(
            select(Order).where(Order.id == order_id, Order.username == identity.subject)
        )
        if order is None:
            raise NotFoundError.order_of_user(order_id, identity.subject)
        return order

    async def create_order(self, identity: Identity, order_in: OrderIn) -> OrderOut:
        """Place an order for the identity at current product prices"""
        self.logger.debug(f"{order_in!r}")
        self._validate_no_duplicated_products(order_in)

        # product id -> quantity
        quantities = {item.product_id: item.quantity for item in order_in.products}

        async with self.db.session() as session:
            country = await self.country_service.find_active_country(
                session, order_in.address.country
            )
            payment_method = await self.payment_method_service.find_active_payment_method(
                session, order_in.payment.payment_method
            )

            products = (await session.scalars(
                select(Product).where(Product.active.is_(True), Product.id.in_(list(quantities)))
            )).all()
            if len(products) != len(quantities):
                missing = sorted(set(quantities) - {product.id for product in products})
                raise NotFoundError(f"products with ids={missing} not found")
            self.logger.info(f"found all ordered products count={len(products)}")

            order_products = [
                OrderProduct(product=product, price=product.price, quantity=quantities[product.id])
                for product in products
            ]
            total_price = sum(
                (order_product.price * order_product.quantity for order_product in order_products),
                Decimal(0),
            )

            order = Order(
                username=identity.subject,
                address=self._address_entity(order_in.address, country.id),
                payment=Payment(payment_method_id=payment_method.id, amount=total_price),
                ordered_at=utc_now(),
                completed_at=None,
                price=total_price,
                order_products=order_products,
            )
            session.add(order)
            await session.flush()

            self.logger.info(f"saved order with id={order.id}")
            return OrderOut.from_entity(order)

    async def get_order(self, identity: Identity, order_id: int) -> OrderOut:
        async with self.db.session() as session:
            order = await self._find_visible_order(session, identity, order_id, *ORDER_PRIVILEGED_ROLES)
            self.logger.info(f"found order with id={order_id}")
            return OrderOut.from_entity(order)

    async def search_orders(self, identity: Identity, filters: OrderFilters,
                            pagination: Pagination) -> Page[OrderOut]:
        """Page of orders; unprivileged users only ever see their own"""
        self.logger.debug(f"{filters!r} {pagination!r}")

        if not has_any_role(identity, ORDER_PRIVILEGED_ROLES):
            filters = filters.model_copy(update={"username": identity.subject})

        predicate = build_order_predicate(filters)

        async with self.db.session() as session:
            total = await session.scalar(select(func.count()).select_from(Order).where(predicate))
            orders = (await session.scalars(
                select(Order)
                .where(predicate)
                .order_by(Order.ordered_at.desc(), Order.id.desc())
                .offset(pagination.offset)
                .limit(pagination.page_size)
            )).all()

            self.logger.info(f"found orders count={len(orders)} total={total}")
            return Page[OrderOut].build(
                [OrderOut.from_entity(order) for order in orders],
                pagination,
                total,
            )

    async def update_order_address(self, identity: Identity, order_id: int,
                                   address_in: AddressIn) -> None:
        """Change the shipping address of an order that is not completed yet"""
        self.logger.debug(f"id={order_id} {address_in!r}")

        async with self.db.session() as session:
            order = await self._find_visible_order(session, identity, order_id, Roles.UPDATE_ORDER)
            if order.completed_at is not None:
                raise ConflictError.order_already_completed(order_id)

            country = await self.country_service.find_active_country(session, address_in.country)

            address = order.address
            address.street = address_in.street
            address.house = address_in.house
            address.postal_code = address_in.postal_code
            address.city = address_in.city
            address.country_id = country.id

            self.logger.info(f"updated address of order with id={order_id}")

    async def complete_order(self, order_id: int, update: CompletedAtUpdate) -> None:
        """Mark the order completed"""
        async with self.db.session() as session:
            order = await self._find_order(session, order_id)
            if order.completed_at is not None:
                raise ConflictError.order_already_completed(order_id)

            completed_at = self._validate_completed_at(order, update.completed_at)
            order.completed_at = completed_at

            self.logger.info(f"completed order with id={order_id}")

    async def complete_order_payment(self, order_id: int, update: CompletedAtUpdate) -> None:
        """Mark the payment of the order completed"""
        async with self.db.session() as session:
            order = await self._find_order(session, order_id)
            payment = order.payment
            if payment.completed_at is not None:
                raise ConflictError.payment_already_completed(order_id)

            completed_at = self._validate_completed_at(order, update.completed_at)
            payment.completed_at = completed_at

            self.logger.info(f"completed payment of order with id={order_id}")

    @staticmethod
    def _validate_completed_at(order: Order, completed_at: datetime) -> datetime:
        completed_at = to_utc_naive(completed_at)
        if completed_at > utc_now():
            raise ValidationError("completed_at cannot be in the future")
        if completed_at < order.ordered_at:
            raise ValidationError("completed_at cannot be before ordered_at")
        return completed_at

    @staticmethod
    def _validate_no_duplicated_products(order_in: OrderIn) -> None:
        product_ids = [item.product_id for item in order_in.products]
        if len(set(product_ids)) != len(product_ids):
            raise ValidationError("order products contain duplicates")

    @staticmethod
    def _address_entity(address_in: AddressIn, country_id: int) -> Address:
        return Address(
            street=address_in.street,
            house=address_in.house,
            postal_code=address_in.postal_code,
            city=address_in.city,
            country_id=country_id,
        )
