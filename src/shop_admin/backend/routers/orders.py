"""
shop_admin.backend.routers.orders

Order endpoints of the dev backend.

Responsibilities:
- List orders (newest first).
- Apply status changes under server-side transition rules.
- Dispatch payment links; resends are always accepted.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from shop_admin.auth.deps import get_principal
from shop_admin.auth.models import Principal
from shop_admin.backend.deps import backend_state
from shop_admin.backend.store import BackendState, OrderRecord, TransitionRejected
from shop_admin.observability.logging import get_logger
from shop_admin.orders.models import FulfillmentStatus, PaymentStatus

log = get_logger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"], dependencies=[Depends(get_principal)])


class StatusUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_status: FulfillmentStatus | None = Field(default=None, alias="orderStatus")
    payment_status: PaymentStatus | None = Field(default=None, alias="paymentStatus")
    tracking_number: str | None = Field(default=None, alias="trackingNumber", max_length=128)


class PaymentLinkRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payment_link: str = Field(alias="paymentLink", max_length=2048)


def _get_order(state: BackendState, order_id: str) -> OrderRecord:
    order = state.orders.get(order_id)
    if order is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Order not found")
    return order


@router.get("")
async def list_orders(state: BackendState = Depends(backend_state)) -> dict[str, Any]:
    return {"success": True, "data": [o.to_payload() for o in state.list_orders()]}


@router.put("/{order_id}/status")
async def update_status(
    order_id: str,
    body: StatusUpdateRequest,
    state: BackendState = Depends(backend_state),
    principal: Principal = Depends(get_principal),
) -> dict[str, Any]:
    order = _get_order(state, order_id)
    try:
        state.change_status(
            order,
            order_status=body.order_status,
            payment_status=body.payment_status,
            tracking_number=body.tracking_number,
        )
    except TransitionRejected as e:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=str(e)) from e

    log.info(
        "order_status_updated",
        order_number=order.order_number,
        order_status=order.order_status.value,
        payment_status=order.payment_status.value,
        actor=principal.username,
    )
    return {"success": True, "data": order.to_payload()}


@router.post("/{order_id}/send-payment-link")
async def send_payment_link(
    order_id: str,
    body: PaymentLinkRequest,
    state: BackendState = Depends(backend_state),
    principal: Principal = Depends(get_principal),
) -> dict[str, Any]:
    order = _get_order(state, order_id)
    try:
        state.send_payment_link(order, body.payment_link)
    except TransitionRejected as e:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=str(e)) from e

    log.info("payment_link_sent", order_number=order.order_number, actor=principal.username)
    return {"success": True, "message": "Payment link sent", "data": order.to_payload()}
