"""
Order Status Tracking

The customer-facing tracker shows four fixed stages. A status maps onto a
stage by lowercasing it and removing whitespace, then comparing with the
stage keys; anything else (``accepted``, ``out_for_delivery``,
``cancelled``) has no stage and shows an empty progress bar.

Live feeds wrap gateway subscriptions:
    - order_detail_feed: replaces only ``status`` on each UPDATE of one order
    - order_list_feed: refetches the user's orders on any change
"""

import re
from typing import AsyncIterator, NamedTuple

from foodzy.schemas import OrderResponse, OrderTracking, OrderWithItems, TrackingStep
from foodzy.services.gateway import BaseDataGateway, Subscription
from foodzy.services.orders import list_orders


class Step(NamedTuple):
    key: str
    label: str


TRACKING_STEPS = (
    Step("pending", "Order Placed"),
    Step("preparing", "Preparing"),
    Step("ontheway", "On the Way"),
    Step("delivered", "Delivered"),
)


def progress_index(status: str) -> int:
    """Index of the stage matching ``status``, or -1."""
    normalized = re.sub(r"\s", "", (status or "").lower())
    for index, step in enumerate(TRACKING_STEPS):
        if step.key == normalized:
            return index
    return -1


def progress_percent(index: int) -> float:
    return max(index, 0) / (len(TRACKING_STEPS) - 1) * 100


def build_tracking(order: OrderWithItems) -> OrderTracking:
    index = progress_index(order.status)
    return OrderTracking(
        order=order,
        progress_index=index,
        progress_percent=progress_percent(index),
        steps=[
            TrackingStep(
                key=step.key,
                label=step.label,
                completed=position <= index,
                active=position == index,
            )
            for position, step in enumerate(TRACKING_STEPS)
        ],
    )


async def order_detail_feed(
    changes: Subscription,
    order: OrderWithItems,
) -> AsyncIterator[OrderTracking]:
    """
    Tracking snapshots for one order, one per status change.

    ``changes`` must be a subscription to ``orders`` UPDATE events scoped
    to the order's id; the caller owns its lifetime.
    """
    async for change in changes:
        status = change.new.get("status")
        if status is None or change.new.get("id") != order.id:
            continue
        order = order.model_copy(update={"status": status})
        yield build_tracking(order)


async def order_list_feed(
    gateway: BaseDataGateway,
    changes: Subscription,
    user_id: str,
) -> AsyncIterator[list[OrderResponse]]:
    """The user's full order list, refetched after every change."""
    async for _ in changes:
        yield await list_orders(gateway, user_id)
