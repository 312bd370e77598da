"""
shop_admin.backend.store

In-memory state of the development backend.

Responsibilities:
- Hold registered administrators (bcrypt password hashes) and orders.
- Apply server-side status transition rules.
- Record customer notifications (shipment notices, payment links).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import bcrypt

from shop_admin.auth.models import Principal
from shop_admin.orders.models import FulfillmentStatus, PaymentStatus

TERMINAL_FULFILLMENT = frozenset({FulfillmentStatus.delivered, FulfillmentStatus.cancelled})


class TransitionRejected(Exception):
    pass


@dataclass(slots=True)
class AdminRecord:
    id: str
    username: str
    email: str
    password_hash: bytes
    role: str = "admin"

    def check_password(self, password: str) -> bool:
        return bcrypt.checkpw(password.encode("utf-8"), self.password_hash)

    def principal(self) -> Principal:
        return Principal(username=self.username, role=self.role, email=self.email, id=self.id)

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username, "email": self.email, "role": self.role}


@dataclass(frozen=True, slots=True)
class Notification:
    kind: str
    order_number: str
    recipient: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class OrderRecord:
    id: str
    order_number: str
    customer: dict[str, Any]
    items: list[dict[str, Any]]
    shipping: dict[str, Any]
    payment_method: str = "sbp"
    order_status: FulfillmentStatus = FulfillmentStatus.new
    payment_status: PaymentStatus = PaymentStatus.pending
    tracking_number: str | None = None
    payment_link: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def total_amount(self) -> float:
        return sum(float(i["price"]) * int(i["quantity"]) for i in self.items)

    def to_payload(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "orderNumber": self.order_number,
            "orderStatus": self.order_status.value,
            "paymentStatus": self.payment_status.value,
            "trackingNumber": self.tracking_number,
            "paymentLink": self.payment_link,
            "paymentMethod": self.payment_method,
            "totalAmount": self.total_amount,
            "items": list(self.items),
            "customer": dict(self.customer),
            "shipping": dict(self.shipping),
            "createdAt": self.created_at.isoformat(),
        }


class BackendState:
    def __init__(self) -> None:
        self.admins: dict[str, AdminRecord] = {}
        self.orders: dict[str, OrderRecord] = {}
        self.notifications: list[Notification] = []

    # -- admins --------------------------------------------------------------

    def add_admin(self, *, username: str, email: str, password: str) -> AdminRecord:
        admin = AdminRecord(
            id=uuid.uuid4().hex,
            username=username,
            email=email,
            password_hash=bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()),
        )
        self.admins[admin.id] = admin
        return admin

    def find_admin(self, username: str) -> AdminRecord | None:
        return next((a for a in self.admins.values() if a.username == username), None)

    # -- orders --------------------------------------------------------------

    def add_order(
        self,
        *,
        customer: dict[str, Any],
        items: list[dict[str, Any]],
        shipping: dict[str, Any] | None = None,
        **extra: Any,
    ) -> OrderRecord:
        order = OrderRecord(
            id=uuid.uuid4().hex,
            order_number=f"ORD-{len(self.orders) + 1:06d}",
            customer=customer,
            items=items,
            shipping=shipping or {},
            **extra,
        )
        self.orders[order.id] = order
        return order

    def list_orders(self) -> list[OrderRecord]:
        return sorted(self.orders.values(), key=lambda o: o.created_at, reverse=True)

    def change_status(
        self,
        order: OrderRecord,
        *,
        order_status: FulfillmentStatus | None,
        payment_status: PaymentStatus | None,
        tracking_number: str | None,
    ) -> OrderRecord:
        if order_status is None and payment_status is None:
            raise TransitionRejected("Nothing to update")
        if (
            order_status is not None
            and order.order_status in TERMINAL_FULFILLMENT
            and order_status != order.order_status
        ):
            raise TransitionRejected(f"Order is already {order.order_status.value}")
        if payment_status is PaymentStatus.failed:
            raise TransitionRejected("Payment status 'failed' is set by the payment provider only")

        if order_status is not None:
            order.order_status = order_status
            tracking = (tracking_number or "").strip()
            if order_status is FulfillmentStatus.shipped and tracking:
                order.tracking_number = tracking
                self._notify(order, "shipment", trackingNumber=tracking)
        if payment_status is not None:
            order.payment_status = payment_status
        return order

    def send_payment_link(self, order: OrderRecord, link: str) -> OrderRecord:
        link = link.strip()
        if not link:
            raise TransitionRejected("Payment link is required")
        order.payment_link = link
        self._notify(order, "payment_link", paymentLink=link)
        return order

    def _notify(self, order: OrderRecord, kind: str, **details: Any) -> None:
        self.notifications.append(
            Notification(
                kind=kind,
                order_number=order.order_number,
                recipient=str(order.customer.get("email", "")),
                details=details,
            )
        )


def seed_demo_orders(state: BackendState) -> None:
    state.add_order(
        customer={
            "firstName": "Anna",
            "lastName": "Petrova",
            "email": "anna@example.com",
            "phone": "+7 900 000-00-01",
        },
        items=[{"name": "Ceramic mug", "price": 1200, "quantity": 2}],
        shipping={
            "method": "cdek_pvz",
            "address": "Lenina 1",
            "city": "Moscow",
            "postalCode": "101000",
            "country": "Russia",
        },
    )
    state.add_order(
        customer={"firstName": "Ivan", "lastName": "Sidorov", "email": "ivan@example.com"},
        items=[{"name": "Linen apron", "price": 2500, "quantity": 1}],
        shipping={
            "method": "post",
            "address": "Mira 5",
            "city": "Kazan",
            "postalCode": "420000",
            "country": "Russia",
        },
        payment_method="cash_courier",
    )
