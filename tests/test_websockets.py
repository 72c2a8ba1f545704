import pytest
from starlette.websockets import WebSocketDisconnect

from conftest import auth_headers


def place_order(client, session, food_item):
    headers = auth_headers(session)
    client.post("/api/cart/items", json={"food_item_id": food_item["id"], "quantity": 1}, headers=headers)
    response = client.post("/api/cart/checkout", headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.parametrize("path", ["/ws/orders", "/ws/orders?token=bogus", "/ws/orders/some-order"])
def test_order_feeds_require_token(client, path):
    with pytest.raises(WebSocketDisconnect) as error:
        with client.websocket_connect(path):
            pass

    assert error.value.code == 4401


def test_unknown_order_is_rejected(client, customer):
    with pytest.raises(WebSocketDisconnect) as error:
        with client.websocket_connect(f"/ws/orders/missing?token={customer['access_token']}"):
            pass

    assert error.value.code == 4404


def test_other_users_order_is_rejected(client, customer, register, menu):
    order = place_order(client, customer, menu["cheeseburger"])
    other = register(email="sam@example.com", full_name="Sam")

    with pytest.raises(WebSocketDisconnect) as error:
        with client.websocket_connect(f"/ws/orders/{order['id']}?token={other['access_token']}"):
            pass

    assert error.value.code == 4404


def test_order_feed_follows_status_changes(client, customer, admin, menu):
    order = place_order(client, customer, menu["margherita"])

    with client.websocket_connect(f"/ws/orders/{order['id']}?token={customer['access_token']}") as websocket:
        initial = websocket.receive_json()
        assert initial["order"]["status"] == "pending"
        assert initial["progress_index"] == 0

        response = client.patch(
            f"/api/admin/orders/{order['id']}/status",
            json={"status": "preparing"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200

        update = websocket.receive_json()

    assert update["order"]["status"] == "preparing"
    assert update["progress_index"] == 1
    assert [step["completed"] for step in update["steps"]] == [True, True, False, False]
    assert update["order"]["order_items"][0]["quantity"] == 1


def test_order_list_feed_sees_new_orders(client, customer, menu):
    with client.websocket_connect(f"/ws/orders?token={customer['access_token']}") as websocket:
        assert websocket.receive_json() == []

        order = place_order(client, customer, menu["pepperoni"])

        orders = websocket.receive_json()

    assert [o["order_number"] for o in orders] == [order["order_number"]]
    assert orders[0]["total_amount"] == 16.99
