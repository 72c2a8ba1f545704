import pytest

from foodzy.services.cart import ADD_FAILED, LOGIN_REQUIRED, UPDATE_FAILED, CartStore
from foodzy.services.gateway import GatewayError

from conftest import auth_headers


@pytest.mark.asyncio
async def test_adding_same_item_merges_into_one_line(gateway, food_factory):
    burger = await food_factory()
    store = await CartStore.load(gateway, "user-1")

    assert await store.add_item(burger["id"], 2, 12.99)
    assert await store.add_item(burger["id"], 3, 12.99)

    assert len(store.items) == 1
    assert store.items[0].quantity == 5
    assert await gateway.count("cart_items", eq={"user_id": "user-1"}) == 1


@pytest.mark.asyncio
async def test_totals_follow_locked_prices(gateway, food_factory):
    burger = await food_factory("Classic Cheeseburger", 12.99)
    pizza = await food_factory("Margherita Pizza", 14.99)
    store = await CartStore.load(gateway, "user-1")

    await store.add_item(burger["id"], 2, 12.99)
    await store.add_item(pizza["id"], 1, 14.99)
    await gateway.update("food_items", {"current_price": 99.0}, eq={"id": burger["id"]})
    await store.refresh()

    assert store.item_count == 3
    assert store.total == pytest.approx(40.97)
    assert store.find(burger["id"]).food_item.name == "Classic Cheeseburger"


@pytest.mark.asyncio
@pytest.mark.parametrize("quantity", [0, -1])
async def test_non_positive_quantity_removes_line(gateway, food_factory, quantity):
    burger = await food_factory()
    store = await CartStore.load(gateway, "user-1")
    await store.add_item(burger["id"], 2, 12.99)

    assert await store.update_quantity(store.items[0].id, quantity)

    assert store.items == []
    assert await gateway.count("cart_items") == 0


@pytest.mark.asyncio
async def test_update_quantity_overwrites(gateway, food_factory):
    burger = await food_factory()
    store = await CartStore.load(gateway, "user-1")
    await store.add_item(burger["id"], 1, 12.99)

    await store.update_quantity(store.items[0].id, 4)

    assert store.items[0].quantity == 4
    assert store.total == pytest.approx(51.96)


@pytest.mark.asyncio
async def test_anonymous_store_asks_for_login(gateway, food_factory):
    burger = await food_factory()
    store = await CartStore.load(gateway, None)

    assert not await store.add_item(burger["id"], 1, 12.99)

    assert store.alert == LOGIN_REQUIRED
    assert await gateway.count("cart_items") == 0


@pytest.mark.asyncio
async def test_bind_discards_previous_identity(gateway, food_factory):
    burger = await food_factory()
    store = await CartStore.load(gateway, "user-1")
    await store.add_item(burger["id"], 1, 12.99)

    await store.bind("user-2")

    assert store.items == []
    assert store.user_id == "user-2"
    await store.bind("user-1")
    assert store.item_count == 1


@pytest.mark.asyncio
async def test_failed_insert_keeps_mirror_and_alerts(gateway, food_factory, monkeypatch):
    burger = await food_factory()
    pizza = await food_factory("Margherita Pizza", 14.99)
    store = await CartStore.load(gateway, "user-1")
    await store.add_item(burger["id"], 1, 12.99)

    async def broken_insert(*args, **kwargs):
        raise GatewayError("connection reset", "insert", "cart_items")

    monkeypatch.setattr(gateway, "insert", broken_insert)

    assert not await store.add_item(pizza["id"], 1, 14.99)
    assert store.alert == ADD_FAILED
    assert [line.food_item_id for line in store.items] == [burger["id"]]


@pytest.mark.asyncio
async def test_failed_update_alerts(gateway, food_factory, monkeypatch):
    burger = await food_factory()
    store = await CartStore.load(gateway, "user-1")
    await store.add_item(burger["id"], 1, 12.99)

    async def broken_update(*args, **kwargs):
        raise GatewayError("timeout", "update", "cart_items")

    monkeypatch.setattr(gateway, "update", broken_update)

    assert not await store.add_item(burger["id"], 1, 12.99)
    assert store.alert == UPDATE_FAILED
    assert store.items[0].quantity == 1


@pytest.mark.asyncio
async def test_carts_are_isolated_per_user(gateway, food_factory):
    burger = await food_factory()
    first = await CartStore.load(gateway, "user-1")
    second = await CartStore.load(gateway, "user-2")
    await first.add_item(burger["id"], 1, 12.99)
    await second.add_item(burger["id"], 2, 12.99)

    await first.remove_item(second.items[0].id)
    await second.refresh()

    assert second.item_count == 2


def test_cart_routes_require_login(client):
    assert client.get("/api/cart").status_code == 401
    assert client.post("/api/cart/checkout").status_code == 401


def test_cart_routes(client, customer, menu):
    headers = auth_headers(customer)
    burger = menu["cheeseburger"]

    response = client.post("/api/cart/items", json={"food_item_id": burger["id"], "quantity": 2}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["item_count"] == 2
    assert body["total"] == pytest.approx(25.98)

    line_id = body["items"][0]["id"]
    response = client.patch(f"/api/cart/items/{line_id}", json={"quantity": 0}, headers=headers)
    assert response.json()["items"] == []

    assert client.patch("/api/cart/items/missing", json={"quantity": 1}, headers=headers).status_code == 404
    response = client.post("/api/cart/items", json={"food_item_id": "missing"}, headers=headers)
    assert response.status_code == 404
