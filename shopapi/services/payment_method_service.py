# shopapi/services/payment_method_service.py
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.entities import PaymentMethod
from ..exceptions import NotFoundError
from ..models.payment_method import PaymentMethodIn, PaymentMethodOut, PaymentMethodPatch


class PaymentMethodService:
    def __init__(self, db):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def find_active_payment_method(self, session: AsyncSession,
                                         payment_method_id: int) -> PaymentMethod:
        """Load an active payment method or raise NotFoundError"""
        payment_method = await session.scalar(
            select(PaymentMethod).where(
                PaymentMethod.id == payment_method_id,
                PaymentMethod.active.is_(True),
            )
        )
        if payment_method is None:
            raise NotFoundError.payment_method(payment_method_id)
        return payment_method

    async def get_payment_methods(self) -> List[PaymentMethodOut]:
        async with self.db.session() as session:
            payment_methods = (await session.scalars(
                select(PaymentMethod)
                .where(PaymentMethod.active.is_(True))
                .order_by(PaymentMethod.id)
            )).all()
            self.logger.info(f"found payment methods count={len(payment_methods)}")
            return [PaymentMethodOut.model_validate(pm) for pm in payment_methods]

    async def get_payment_method(self, payment_method_id: int) -> PaymentMethodOut:
        async with self.db.session() as session:
            payment_method = await self.find_active_payment_method(session, payment_method_id)
            self.logger.info(f"found payment method with id={payment_method_id}")
            return PaymentMethodOut.model_validate(payment_method)

    async def add_payment_method(self, payment_method_in: PaymentMethodIn) -> PaymentMethodOut:
        self.logger.debug(f"{payment_method_in!r}")

        async with self.db.session() as session:
            payment_method = PaymentMethod(
                active=True,
                name=payment_method_in.name,
                description=payment_method_in.description,
            )
            session.add(payment_method)
            await session.flush()

            self.logger.info(f"created payment method with id={payment_method.id}")
            return PaymentMethodOut.model_validate(payment_method)

    async def update_payment_method(self, payment_method_id: int,
                                    patch: PaymentMethodPatch) -> None:
        self.logger.debug(f"id={payment_method_id} {patch!r}")

        async with self.db.session() as session:
            payment_method = await self.find_active_payment_method(session, payment_method_id)

            if patch.name is not None:
                payment_method.name = patch.name
            if patch.description is not None:
                payment_method.description = patch.description

            self.logger.info(f"updated payment method with id={payment_method_id}")

    async def delete_payment_method(self, payment_method_id: int) -> None:
        """Mark the payment method inactive"""
        async with self.db.session() as session:
            payment_method = await self.find_active_payment_method(session, payment_method_id)
            payment_method.active = False
            self.logger.info(f"deleted payment method with id={payment_method_id}")
