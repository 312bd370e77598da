"""
shop_admin.orders.models

Order types held by the console.

Responsibilities:
- Enumerate the fulfillment and payment status axes.
- Map every status to display metadata (total mappings, checked at import).
- Parse backend order records into an immutable `Order` projection.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FulfillmentStatus(enum.StrEnum):
    new = "new"
    processing = "processing"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"


class PaymentStatus(enum.StrEnum):
    pending = "pending"
    paid = "paid"
    failed = "failed"
    refunded = "refunded"


# `failed` is set by the payment provider side only.
ADMIN_PAYMENT_STATUSES: tuple[PaymentStatus, ...] = (
    PaymentStatus.pending,
    PaymentStatus.paid,
    PaymentStatus.refunded,
)


@dataclass(frozen=True, slots=True)
class StatusDisplay:
    label: str
    tone: str


E = TypeVar("E", bound=enum.Enum)


def _total(enum_cls: type[E], mapping: dict[E, StatusDisplay]) -> Mapping[E, StatusDisplay]:
    missing = [m.value for m in enum_cls if m not in mapping]
    if missing:
        raise RuntimeError(f"{enum_cls.__name__} has no display entry for: {', '.join(missing)}")
    return MappingProxyType(mapping)


FULFILLMENT_DISPLAY = _total(
    FulfillmentStatus,
    {
        FulfillmentStatus.new: StatusDisplay("New", "blue"),
        FulfillmentStatus.processing: StatusDisplay("Processing", "yellow"),
        FulfillmentStatus.shipped: StatusDisplay("Shipped", "purple"),
        FulfillmentStatus.delivered: StatusDisplay("Delivered", "green"),
        FulfillmentStatus.cancelled: StatusDisplay("Cancelled", "red"),
    },
)

PAYMENT_DISPLAY = _total(
    PaymentStatus,
    {
        PaymentStatus.pending: StatusDisplay("Pending", "gray"),
        PaymentStatus.paid: StatusDisplay("Paid", "green"),
        PaymentStatus.failed: StatusDisplay("Failed", "red"),
        PaymentStatus.refunded: StatusDisplay("Refunded", "orange"),
    },
)


def fulfillment_display(value: str) -> StatusDisplay:
    try:
        return FULFILLMENT_DISPLAY[FulfillmentStatus(value)]
    except ValueError:
        return FULFILLMENT_DISPLAY[FulfillmentStatus.new]


def payment_display(value: str) -> StatusDisplay:
    try:
        return PAYMENT_DISPLAY[PaymentStatus(value)]
    except ValueError:
        return PAYMENT_DISPLAY[PaymentStatus.pending]


class _BackendRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class OrderItem(_BackendRecord):
    name: str
    price: float
    quantity: int
    image: str | None = None

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class Customer(_BackendRecord):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Shipping(_BackendRecord):
    method: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None


class Order(_BackendRecord):
    """
    Local projection of a backend-owned order. Never patched in place: every
    successful mutation replaces the whole record with the backend's copy.
    """

    order_id: str = Field(alias="_id")
    order_number: str
    fulfillment_status: FulfillmentStatus = Field(
        default=FulfillmentStatus.new, alias="orderStatus"
    )
    payment_status: PaymentStatus = PaymentStatus.pending
    tracking_number: str | None = None
    payment_link: str | None = None
    payment_method: str | None = None

    total_amount: float = 0
    items: list[OrderItem] = Field(default_factory=list)
    customer: Customer = Field(default_factory=Customer)
    shipping: Shipping | None = None
    created_at: datetime | None = None

    @classmethod
    def from_backend(cls, payload: dict[str, Any]) -> Order:
        return cls.model_validate(payload)


def payment_link_action(order: Order) -> Literal["send", "resend"]:
    # Wording only; resending is always allowed.
    return "resend" if order.payment_link else "send"
