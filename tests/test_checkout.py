import re

import pytest

from foodzy.services.cart import CartStore
from foodzy.services.orders import EmptyCartError, checkout, get_order, list_orders, set_order_status

from conftest import auth_headers


@pytest.fixture
def cart_with_two_lines(gateway, food_factory):
    async def build(user_id="user-1"):
        soup = await food_factory("Tomato Soup", 10.00)
        fries = await food_factory("Fries", 7.50)
        store = await CartStore.load(gateway, user_id)
        await store.add_item(soup["id"], 1, 10.00)
        await store.add_item(fries["id"], 2, 7.50)
        return store
    return build


@pytest.mark.asyncio
async def test_checkout_creates_order_and_items(gateway, cart_with_two_lines):
    store = await cart_with_two_lines()

    order = await checkout(gateway, store, {"street": "12 Market Street"})

    assert order.total_amount == pytest.approx(25.00)
    assert order.status == "pending"
    assert order.payment_status == "pending"
    assert order.delivery_address_snapshot == {"street": "12 Market Street"}
    assert re.fullmatch(r"FZ-\d{8}-[0-9A-F]{6}", order.order_number)

    detail = await get_order(gateway, order.id, "user-1")
    lines = sorted(detail.order_items, key=lambda line: line.total_price)
    assert [(line.quantity, line.price_at_order, line.total_price) for line in lines] == [
        (1, 10.00, 10.00),
        (2, 7.50, 15.00),
    ]
    assert {line.food_item_snapshot["name"] for line in lines} == {"Tomato Soup", "Fries"}


@pytest.mark.asyncio
async def test_checkout_empties_cart(gateway, cart_with_two_lines):
    store = await cart_with_two_lines()

    await checkout(gateway, store)

    assert store.items == []
    assert await gateway.count("cart_items", eq={"user_id": "user-1"}) == 0
    await store.refresh()
    assert store.total == 0


@pytest.mark.asyncio
async def test_empty_cart_is_rejected(gateway):
    store = await CartStore.load(gateway, "user-1")

    with pytest.raises(EmptyCartError):
        await checkout(gateway, store)
    assert await gateway.count("orders") == 0


@pytest.mark.asyncio
async def test_repeated_idempotency_key_returns_first_order(gateway, cart_with_two_lines):
    store = await cart_with_two_lines()

    first = await checkout(gateway, store, idempotency_key="checkout-123")
    second = await checkout(gateway, store, idempotency_key="checkout-123")

    assert second.id == first.id
    assert await gateway.count("orders") == 1


@pytest.mark.asyncio
async def test_idempotency_keys_are_per_user(gateway, cart_with_two_lines):
    alice = await checkout(
        gateway, await cart_with_two_lines("alice"), {"street": "Alice St"}, idempotency_key="same-key"
    )
    bob_store = await cart_with_two_lines("bob")

    bob = await checkout(gateway, bob_store, {"street": "Bob Ave"}, idempotency_key="same-key")

    assert bob.id != alice.id
    assert bob.user_id == "bob"
    assert bob.delivery_address_snapshot == {"street": "Bob Ave"}
    assert await gateway.count("cart_items", eq={"user_id": "bob"}) == 0
    assert await gateway.count("orders") == 2


@pytest.mark.asyncio
async def test_replayed_order_leaves_new_cart_alone(gateway, cart_with_two_lines, food_factory, monkeypatch):
    store = await cart_with_two_lines()
    first = await checkout(gateway, store, idempotency_key="checkout-123")

    cake = await food_factory("Cake", 5.00)
    await store.add_item(cake["id"], 1, 5.00)

    async def no_match(*args, **kwargs):
        return None

    # a concurrent retry that missed the first order in the service lookup
    monkeypatch.setattr(gateway, "select_one", no_match)
    replay = await checkout(gateway, store, idempotency_key="checkout-123")

    assert replay.id == first.id
    assert [line.food_item_id for line in store.items] == [cake["id"]]
    assert await gateway.count("cart_items", eq={"user_id": "user-1"}) == 1


@pytest.mark.asyncio
async def test_orders_are_scoped_to_their_owner(gateway, cart_with_two_lines):
    order = await checkout(gateway, await cart_with_two_lines("user-1"))

    assert await get_order(gateway, order.id, "user-2") is None
    assert [o.id for o in await list_orders(gateway, "user-1")] == [order.id]
    assert await list_orders(gateway, "user-2") == []


@pytest.mark.asyncio
async def test_status_update_appends_history(gateway, cart_with_two_lines):
    order = await checkout(gateway, await cart_with_two_lines())

    updated = await set_order_status(gateway, order.id, "preparing")

    assert updated.status == "preparing"
    history = await gateway.select("order_status_history", eq={"order_id": order.id})
    assert [row["notes"] for row in history] == ["Status updated to preparing by admin"]
    assert await set_order_status(gateway, "missing", "preparing") is None


def test_checkout_route(client, customer, menu):
    headers = auth_headers(customer)
    client.post("/api/cart/items", json={"food_item_id": menu["cheeseburger"]["id"], "quantity": 2}, headers=headers)

    response = client.post(
        "/api/cart/checkout",
        json={"delivery_address": {"city": "Mumbai"}},
        headers={**headers, "Idempotency-Key": "abc"},
    )
    assert response.status_code == 201
    order = response.json()
    assert order["total_amount"] == pytest.approx(25.98)

    retry = client.post("/api/cart/checkout", headers={**headers, "Idempotency-Key": "abc"})
    assert retry.status_code == 201
    assert retry.json()["id"] == order["id"]

    empty = client.post("/api/cart/checkout", headers=headers)
    assert empty.status_code == 400
    assert client.get("/api/cart", headers=headers).json()["items"] == []

    detail = client.get(f"/api/orders/{order['id']}", headers=headers).json()
    assert detail["progress_index"] == 0
    assert len(detail["order"]["order_items"]) == 1
    assert client.get("/api/orders/unknown", headers=headers).status_code == 404
