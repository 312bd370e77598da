"""
shop_admin.orders.workflow

Order Workflow Controller.

Responsibilities:
- Request fulfillment and payment status transitions.
- Dispatch (and re-dispatch) payment links.
- Replace local order records with the backend's canonical copy after every
  accepted mutation, and close the detail view of the mutated order.

Each call carries exactly the side-effect payload its own arguments ask for;
nothing is carried over from earlier calls or from the locally held record.
"""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError

from shop_admin.clients.backend import BackendClient
from shop_admin.errors import BackendRejected, Outcome, ShopAdminError, ValidationFailed
from shop_admin.observability.logging import get_logger
from shop_admin.orders.models import (
    ADMIN_PAYMENT_STATUSES,
    FulfillmentStatus,
    Order,
    PaymentStatus,
)
from shop_admin.session.manager import SessionManager

log = get_logger(__name__)

E = TypeVar("E", bound=enum.Enum)


def _coerce(enum_cls: type[E], value: str, what: str) -> E:
    try:
        return enum_cls(value)
    except ValueError as e:
        raise ValidationFailed(f"Unknown {what}: {value!r}", details={"field": what}) from e


def _parse(payload: dict[str, Any]) -> Order:
    try:
        return Order.from_backend(payload)
    except PydanticValidationError as e:
        raise BackendRejected(
            "Malformed order record", details={"errors": e.errors(include_url=False)}
        ) from e


def _id_of(payload: dict[str, Any]) -> str:
    return str(payload.get("_id") or payload.get("id") or "")


class OrderWorkflowController:
    def __init__(self, *, backend: BackendClient, session: SessionManager) -> None:
        self._backend = backend
        self._session = session
        self._orders: dict[str, Order] = {}
        self._selected_id: str | None = None

    # -- local view ----------------------------------------------------------

    @property
    def orders(self) -> list[Order]:
        return list(self._orders.values())

    def get(self, order_id: str) -> Order | None:
        return self._orders.get(order_id)

    @property
    def selected(self) -> Order | None:
        if self._selected_id is None:
            return None
        return self._orders.get(self._selected_id)

    def open_order(self, order_id: str) -> Order | None:
        order = self._orders.get(order_id)
        self._selected_id = order.order_id if order else None
        return order

    def close_order(self) -> None:
        self._selected_id = None

    # -- operations ----------------------------------------------------------

    async def list_orders(self) -> Outcome[list[Order]]:
        try:
            async with self._session.privileged():
                raw = await self._backend.list_orders()
            orders = [_parse(r) for r in raw]
        except ShopAdminError as e:
            log.warning("orders_list_failed", error=e.kind.value, message=e.message)
            return Outcome.failure(e)

        self._orders = {o.order_id: o for o in orders}
        if self._selected_id not in self._orders:
            self._selected_id = None
        return Outcome.success(orders)

    async def set_fulfillment_status(
        self,
        order_id: str,
        new_status: FulfillmentStatus | str,
        tracking_number: str | None = None,
    ) -> Outcome[Order]:
        try:
            self._require_id(order_id)
            status = _coerce(FulfillmentStatus, new_status, "fulfillment status")
        except ValidationFailed as e:
            return Outcome.failure(e)

        body: dict[str, Any] = {"orderStatus": status.value}
        tracking = (tracking_number or "").strip()
        if status is FulfillmentStatus.shipped and tracking:
            # Sent in the same request so the shipment notice includes it.
            body["trackingNumber"] = tracking

        return await self._mutate(
            order_id,
            lambda: self._backend.update_order_status(order_id, body),
            event="order_fulfillment_status_changed",
            requested=status.value,
            with_tracking="trackingNumber" in body,
        )

    async def set_payment_status(
        self, order_id: str, new_status: PaymentStatus | str
    ) -> Outcome[Order]:
        try:
            self._require_id(order_id)
            status = _coerce(PaymentStatus, new_status, "payment status")
            if status not in ADMIN_PAYMENT_STATUSES:
                raise ValidationFailed(
                    f"Payment status {status.value!r} cannot be set manually",
                    details={"field": "payment status"},
                )
        except ValidationFailed as e:
            return Outcome.failure(e)

        body = {"paymentStatus": status.value}
        return await self._mutate(
            order_id,
            lambda: self._backend.update_order_status(order_id, body),
            event="order_payment_status_changed",
            requested=status.value,
        )

    async def send_payment_link(self, order_id: str, link: str) -> Outcome[Order]:
        cleaned = (link or "").strip()
        try:
            self._require_id(order_id)
            if not cleaned:
                raise ValidationFailed("Payment link is required", details={"field": "paymentLink"})
        except ValidationFailed as e:
            return Outcome.failure(e)

        previous = self._orders.get(order_id)
        return await self._mutate(
            order_id,
            lambda: self._backend.send_payment_link(order_id, cleaned),
            event="order_payment_link_sent",
            after=lambda order: order.model_copy(update={"payment_link": cleaned}),
            resend=bool(previous and previous.payment_link),
        )

    # -- internals -----------------------------------------------------------

    @staticmethod
    def _require_id(order_id: str) -> None:
        if not order_id or not str(order_id).strip():
            raise ValidationFailed("Order id is required", details={"field": "orderId"})

    async def _mutate(
        self,
        order_id: str,
        call: Callable[[], Awaitable[dict[str, Any] | None]],
        *,
        event: str,
        after: Callable[[Order], Order] | None = None,
        **fields: Any,
    ) -> Outcome[Order]:
        try:
            async with self._session.privileged():
                returned = await call()
                order = await self._canonical(order_id, returned)
        except ShopAdminError as e:
            log.warning(
                f"{event}_failed",
                order_id=order_id,
                error=e.kind.value,
                message=e.message,
                status_code=e.status_code,
                **fields,
            )
            return Outcome.failure(e)

        if after is not None:
            order = after(order)
        self._orders[order.order_id] = order
        if self._selected_id == order.order_id:
            self._selected_id = None

        log.info(
            event,
            order_id=order.order_id,
            order_number=order.order_number,
            fulfillment_status=order.fulfillment_status.value,
            payment_status=order.payment_status.value,
            **fields,
        )
        return Outcome.success(order)

    async def _canonical(self, order_id: str, returned: dict[str, Any] | None) -> Order:
        if returned is not None:
            return _parse(returned)

        # Acknowledged without a body: re-read the backend's copy.
        for raw in await self._backend.list_orders():
            if _id_of(raw) == order_id:
                return _parse(raw)
        raise BackendRejected("Updated order not found", status_code=404, details={"order_id": order_id})


# --- Module Notes -----------------------------------------------------------
# No locking, retries or queueing: a failed call leaves local state untouched and
# is re-issued explicitly by the caller.
