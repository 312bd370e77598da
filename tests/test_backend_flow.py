"""
tests.test_backend_flow

End-to-end flows of the console against the in-process dev backend, checking
which customer notifications each transition triggers.
"""

from __future__ import annotations

import pytest

from shop_admin.backend.store import BackendState, OrderRecord
from shop_admin.console import AdminConsole
from shop_admin.errors import ErrorKind
from shop_admin.orders.models import FulfillmentStatus, PaymentStatus


def _seed(state: BackendState, **extra) -> OrderRecord:
    return state.add_order(
        customer={"firstName": "Anna", "lastName": "Petrova", "email": "anna@example.com"},
        items=[{"name": "Ceramic mug", "price": 1200, "quantity": 2}],
        shipping={"method": "cdek_pvz", "city": "Moscow"},
        **extra,
    )


@pytest.fixture
def seeded(backend_state: BackendState) -> OrderRecord:
    return _seed(backend_state)


async def _sign_in(console: AdminConsole) -> None:
    assert (await console.session.register("root", "root@example.com", "secret1")).success
    assert (await console.orders.list_orders()).ok


@pytest.mark.asyncio
async def test_listing_parses_backend_records(console: AdminConsole, seeded: OrderRecord) -> None:
    await _sign_in(console)

    [order] = console.orders.orders
    assert order.order_id == seeded.id
    assert order.order_number == seeded.order_number
    assert order.total_amount == 2400
    assert order.customer.full_name == "Anna Petrova"
    assert order.items[0].subtotal == 2400


@pytest.mark.asyncio
async def test_shipping_with_tracking_sends_one_shipment_notice(
    console: AdminConsole, backend_state: BackendState, seeded: OrderRecord
) -> None:
    await _sign_in(console)

    outcome = await console.orders.set_fulfillment_status(seeded.id, "shipped", "TRACK123")

    assert outcome.ok
    assert outcome.value.tracking_number == "TRACK123"
    assert [(n.kind, n.details) for n in backend_state.notifications] == [
        ("shipment", {"trackingNumber": "TRACK123"})
    ]
    assert backend_state.notifications[0].recipient == "anna@example.com"


@pytest.mark.asyncio
async def test_other_transitions_send_no_shipment_notice(
    console: AdminConsole, backend_state: BackendState, seeded: OrderRecord
) -> None:
    await _sign_in(console)

    assert (await console.orders.set_fulfillment_status(seeded.id, "processing", "TRACK123")).ok
    assert (await console.orders.set_fulfillment_status(seeded.id, "shipped")).ok
    assert (await console.orders.set_payment_status(seeded.id, "paid")).ok

    assert backend_state.notifications == []
    assert seeded.tracking_number is None
    order = console.orders.get(seeded.id)
    assert order.fulfillment_status is FulfillmentStatus.shipped
    assert order.payment_status is PaymentStatus.paid


@pytest.mark.asyncio
async def test_terminal_status_change_is_rejected_by_backend(
    console: AdminConsole, backend_state: BackendState
) -> None:
    cancelled = _seed(backend_state, order_status=FulfillmentStatus.cancelled)
    await _sign_in(console)

    outcome = await console.orders.set_fulfillment_status(cancelled.id, "shipped", "TRACK123")

    assert outcome.error is ErrorKind.backend_rejected
    assert outcome.message == "Order is already cancelled"
    assert console.orders.get(cancelled.id).fulfillment_status is FulfillmentStatus.cancelled
    assert backend_state.notifications == []


@pytest.mark.asyncio
async def test_failed_payment_can_be_moved_by_admin(
    console: AdminConsole, backend_state: BackendState
) -> None:
    failed = _seed(backend_state, payment_status=PaymentStatus.failed)
    await _sign_in(console)

    outcome = await console.orders.set_payment_status(failed.id, "pending")

    assert outcome.ok
    assert outcome.value.payment_status is PaymentStatus.pending


@pytest.mark.asyncio
async def test_payment_link_resend_notifies_each_time(
    console: AdminConsole, backend_state: BackendState, seeded: OrderRecord
) -> None:
    await _sign_in(console)

    assert (await console.orders.send_payment_link(seeded.id, "https://pay.example/x")).ok
    assert (await console.orders.send_payment_link(seeded.id, "https://pay.example/z")).ok

    assert [n.details["paymentLink"] for n in backend_state.notifications] == [
        "https://pay.example/x",
        "https://pay.example/z",
    ]
    assert console.orders.get(seeded.id).payment_link == "https://pay.example/z"


@pytest.mark.asyncio
async def test_unknown_order_is_a_backend_rejection(console: AdminConsole) -> None:
    await _sign_in(console)

    outcome = await console.orders.set_payment_status("missing", "paid")

    assert outcome.error is ErrorKind.backend_rejected
    assert outcome.message == "Order not found"
    assert console.session.authenticated


@pytest.mark.asyncio
async def test_anonymous_calls_are_unauthorized(console: AdminConsole, seeded: OrderRecord) -> None:
    outcome = await console.orders.list_orders()

    assert outcome.error is ErrorKind.unauthorized
    assert outcome.message == "Missing bearer token"
    assert not console.session.authenticated
