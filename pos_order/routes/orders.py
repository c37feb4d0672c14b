"""
routes/orders.py
----------------

API routes for the POS order lifecycle.  Each endpoint delegates to
the shared :class:`~pos_order.services.order_service.OrderClient`
stored on the application state and returns the upstream JSON as is.
Failures propagate as ``PosOrderError`` and are rendered by the
handler registered in :mod:`pos_order.main`.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request

from pos_order.logging_config import logger
from pos_order.schemas.orders import CreateOrderRequest, PaymentType, TypedOrderRequest
from pos_order.services.order_service import OrderClient


router = APIRouter()


def get_order_client(request: Request) -> OrderClient:
    return request.app.state.order_client


@router.post("/pos-orders")
def post_create_order(data: CreateOrderRequest, client: OrderClient = Depends(get_order_client)):
    """Create a POS order whose type is given in the body."""
    logger.info(json.dumps({
        "event": "create_order_request",
        "type": data.type,
        "terminal_id": data.terminal_id,
        "order_number": data.order_number,
    }))
    return client.create_order(data.model_dump(exclude_none=True))


@router.post("/pos-orders/{payment_type}")
def post_typed_order(
    payment_type: PaymentType,
    data: TypedOrderRequest,
    client: OrderClient = Depends(get_order_client),
):
    shortcuts = {
        PaymentType.card_purchase: client.card_purchase,
        PaymentType.pay_with_phone: client.pay_with_phone,
        PaymentType.ussd: client.ussd_payment,
    }
    logger.info(json.dumps({
        "event": "typed_order_request",
        "type": payment_type.value,
        "terminal_id": data.terminal_id,
    }))
    return shortcuts[payment_type](data.amount, data.terminal_id, data.order_number, data.callback_url)


@router.get("/pos-orders/{order_id}/retry")
def get_retry_order(order_id: str, client: OrderClient = Depends(get_order_client)):
    return client.retry_order(order_id)


@router.get("/pos-orders/{order_id}/status")
def get_order_status(
    order_id: str,
    terminal_id: Optional[str] = Query(None),
    client: OrderClient = Depends(get_order_client),
):
    return client.get_order_status(order_id, terminal_id)


@router.get("/payment-types")
def get_payment_types(client: OrderClient = Depends(get_order_client)) -> Dict[str, str]:
    return client.get_payment_types()


@router.get("/order-number")
def get_order_number(prefix: str = Query("POS", min_length=1)) -> Dict[str, Any]:
    return {"order_number": OrderClient.generate_order_number(prefix)}
