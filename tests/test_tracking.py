import asyncio

import pytest

from foodzy.schemas import OrderWithItems
from foodzy.services.cart import CartStore
from foodzy.services.orders import checkout, get_order, set_order_status
from foodzy.services.tracking import (
    TRACKING_STEPS,
    build_tracking,
    order_detail_feed,
    order_list_feed,
    progress_index,
    progress_percent,
)


@pytest.mark.parametrize("status, expected", [
    ("pending", 0),
    ("Preparing", 1),
    ("On the Way", 2),
    ("ontheway", 2),
    ("delivered", 3),
    ("out_for_delivery", -1),
    ("accepted", -1),
    ("cancelled", -1),
    ("", -1),
])
def test_progress_index(status, expected):
    assert progress_index(status) == expected


def test_progress_percent():
    assert progress_percent(-1) == 0
    assert progress_percent(0) == 0
    assert progress_percent(2) == pytest.approx(66.67, abs=0.01)
    assert progress_percent(3) == 100


def test_build_tracking_marks_steps():
    order = OrderWithItems(
        id="o1",
        order_number="FZ-20260101-ABCDEF",
        user_id="u1",
        status="ontheway",
        total_amount=10.0,
        payment_status="pending",
    )

    tracking = build_tracking(order)

    assert [step.label for step in tracking.steps] == [step.label for step in TRACKING_STEPS]
    assert [step.completed for step in tracking.steps] == [True, True, True, False]
    assert [step.active for step in tracking.steps] == [False, False, True, False]


async def _place_order(gateway, food_factory):
    burger = await food_factory()
    store = await CartStore.load(gateway, "user-1")
    await store.add_item(burger["id"], 1, 12.99)
    return await checkout(gateway, store)


@pytest.mark.asyncio
async def test_detail_feed_replaces_status(gateway, food_factory):
    order = await _place_order(gateway, food_factory)
    detail = await get_order(gateway, order.id, "user-1")

    async with gateway.subscribe("orders", event="UPDATE", eq={"id": order.id}) as changes:
        feed = order_detail_feed(changes, detail)
        await set_order_status(gateway, order.id, "preparing")
        tracking = await asyncio.wait_for(anext(feed), timeout=1)
        await feed.aclose()

    assert tracking.order.status == "preparing"
    assert tracking.progress_index == 1
    assert tracking.order.order_items == detail.order_items


@pytest.mark.asyncio
async def test_list_feed_refetches_on_any_change(gateway, food_factory):
    async with gateway.subscribe("orders", eq={"user_id": "user-1"}) as changes:
        feed = order_list_feed(gateway, changes, "user-1")
        order = await _place_order(gateway, food_factory)
        orders = await asyncio.wait_for(anext(feed), timeout=1)
        await feed.aclose()

    assert [o.id for o in orders] == [order.id]


@pytest.mark.asyncio
async def test_subscription_is_released_on_exit(gateway):
    with pytest.raises(RuntimeError):
        async with gateway.subscribe("orders"):
            assert gateway.active_subscriptions == 1
            raise RuntimeError("view closed")

    assert gateway.active_subscriptions == 0
