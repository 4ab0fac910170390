# shopapi/handlers/order_handlers.py
from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from ..models.order import AddressIn, CompletedAtUpdate, OrderIn, OrderOut, OrdersQuery
from ..models.shared import Page
from ..services.order_service import OrderService
from ..utils.security import require_access
from .base_handler import DatabaseDep, IdentityDep

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=Page[OrderOut])
async def list_orders(query: Annotated[OrdersQuery, Query()],
                      identity: IdentityDep, db: DatabaseDep):
    """Page of orders; users without order roles only see their own"""
    identity = require_access(identity, "list_orders")
    return await OrderService(db).search_orders(identity, filters=query, pagination=query)


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(order_id: int, identity: IdentityDep, db: DatabaseDep):
    identity = require_access(identity, "get_order")
    return await OrderService(db).get_order(identity, order_id)


@router.post("", response_model=OrderOut)
async def create_order(order: OrderIn, identity: IdentityDep, db: DatabaseDep):
    """Place an order for the authenticated user"""
    identity = require_access(identity, "create_order")
    return await OrderService(db).create_order(identity, order)


@router.put("/{order_id}/address", status_code=status.HTTP_204_NO_CONTENT)
async def update_order_address(order_id: int, address: AddressIn,
                               identity: IdentityDep, db: DatabaseDep):
    identity = require_access(identity, "update_order_address")
    await OrderService(db).update_order_address(identity, order_id, address)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{order_id}/completed-at", status_code=status.HTTP_204_NO_CONTENT)
async def complete_order(order_id: int, update: CompletedAtUpdate,
                         identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "complete_order")
    await OrderService(db).complete_order(order_id, update)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{order_id}/payment/completed-at", status_code=status.HTTP_204_NO_CONTENT)
async def complete_order_payment(order_id: int, update: CompletedAtUpdate,
                                 identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "complete_order_payment")
    await OrderService(db).complete_order_payment(order_id, update)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
