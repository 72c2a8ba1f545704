"""
Orders

Checkout turns the caller's cart into an order and its items through the
gateway's ``place_order`` composite, so the order, the items and the
emptied cart land together. Reads return explicit composed types.
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Optional

from foodzy.models import OrderStatus, PaymentStatus
from foodzy.schemas import OrderResponse, OrderWithItems
from foodzy.services.cart import CartStore
from foodzy.services.gateway import BaseDataGateway, Embed

logger = logging.getLogger(__name__)

ORDER_ITEMS_EMBED = Embed(
    "order_items",
    "order_items",
    "id",
    "order_id",
    many=True,
    embed=(Embed("food_item", "food_items", "food_item_id"),),
)
PROFILE_EMBED = Embed("profile", "user_profiles", "user_id")


class EmptyCartError(Exception):
    """Checkout was attempted with nothing in the cart."""


def generate_order_number(now: Optional[datetime] = None) -> str:
    """
    Human-readable order number.

    Format: FZ-YYYYMMDD-XXXXXX (six uppercase hex characters)
    """
    now = now or datetime.now(timezone.utc)
    return f"FZ-{now:%Y%m%d}-{secrets.token_hex(3).upper()}"


async def checkout(
    gateway: BaseDataGateway,
    store: CartStore,
    delivery_address: Optional[dict[str, Any]] = None,
    idempotency_key: Optional[str] = None,
) -> OrderResponse:
    """
    Place an order for everything in ``store``.

    A request repeating an earlier ``idempotency_key`` returns the order
    first placed with it, even though the cart is empty by then.

    Raises:
        EmptyCartError: The cart holds no items
        GatewayError: The backend rejected the order
    """
    if idempotency_key:
        existing = await gateway.select_one(
            "orders", eq={"idempotency_key": idempotency_key, "user_id": store.user_id}
        )
        if existing:
            return OrderResponse.model_validate(existing)

    if not store.items:
        raise EmptyCartError("Your cart is empty")

    order = {
        "order_number": generate_order_number(),
        "status": OrderStatus.PENDING.value,
        "payment_status": PaymentStatus.PENDING.value,
        "total_amount": round(store.total, 2),
        "delivery_address_snapshot": delivery_address,
    }
    items = [
        {
            "food_item_id": line.food_item_id,
            "quantity": line.quantity,
            "price_at_order": line.price_at_add,
            "total_price": round(line.price_at_add * line.quantity, 2),
            "food_item_snapshot": {"name": line.food_item.name if line.food_item else None},
        }
        for line in store.items
    ]

    placed = await gateway.place_order(store.user_id, order, items, idempotency_key)
    if placed["order_number"] != order["order_number"]:
        logger.info(f"Checkout replayed order {placed['order_number']} for {store.user_id}")
        return OrderResponse.model_validate(placed)

    store.items = []
    logger.info(
        f"Order {placed['order_number']} placed by {store.user_id}: "
        f"{len(items)} lines, total {placed['total_amount']:.2f}"
    )
    return OrderResponse.model_validate(placed)


async def list_orders(gateway: BaseDataGateway, user_id: str) -> list[OrderResponse]:
    """The user's orders, newest first."""
    rows = await gateway.select(
        "orders", eq={"user_id": user_id}, order_by="created_at", descending=True
    )
    return [OrderResponse.model_validate(row) for row in rows]


async def get_order(
    gateway: BaseDataGateway,
    order_id: str,
    user_id: Optional[str] = None,
) -> Optional[OrderWithItems]:
    """One order with its items; scoped to ``user_id`` when given."""
    eq = {"id": order_id}
    if user_id:
        eq["user_id"] = user_id
    row = await gateway.select_one("orders", eq=eq, embed=(ORDER_ITEMS_EMBED, PROFILE_EMBED))
    return OrderWithItems.model_validate(row) if row else None


async def set_order_status(
    gateway: BaseDataGateway,
    order_id: str,
    status: str,
) -> Optional[OrderResponse]:
    """Write a new status and its history row."""
    row = await gateway.update_order_status(
        order_id, status, f"Status updated to {status} by admin"
    )
    if row is None:
        return None
    logger.info(f"Order {order_id} status -> {status}")
    return OrderResponse.model_validate(row)
