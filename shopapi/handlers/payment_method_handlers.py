# shopapi/handlers/payment_method_handlers.py
from typing import List

from fastapi import APIRouter, Response, status

from ..models.payment_method import PaymentMethodIn, PaymentMethodOut, PaymentMethodPatch
from ..services.payment_method_service import PaymentMethodService
from ..utils.security import require_access
from .base_handler import DatabaseDep, IdentityDep

router = APIRouter(prefix="/payment-methods", tags=["payment methods"])


@router.get("", response_model=List[PaymentMethodOut])
async def list_payment_methods(identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "list_payment_methods")
    return await PaymentMethodService(db).get_payment_methods()


@router.get("/{payment_method_id}", response_model=PaymentMethodOut)
async def get_payment_method(payment_method_id: int, identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "get_payment_method")
    return await PaymentMethodService(db).get_payment_method(payment_method_id)


@router.post("", response_model=PaymentMethodOut)
async def create_payment_method(payment_method: PaymentMethodIn,
                                identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "create_payment_method")
    return await PaymentMethodService(db).add_payment_method(payment_method)


@router.patch("/{payment_method_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_payment_method(payment_method_id: int, patch: PaymentMethodPatch,
                                identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "update_payment_method")
    await PaymentMethodService(db).update_payment_method(payment_method_id, patch)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{payment_method_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment_method(payment_method_id: int, identity: IdentityDep, db: DatabaseDep):
    """Delete a payment method by marking it inactive"""
    require_access(identity, "delete_payment_method")
    await PaymentMethodService(db).delete_payment_method(payment_method_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
