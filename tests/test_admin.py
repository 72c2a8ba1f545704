import pytest

from conftest import auth_headers


def test_admin_routes_require_admin(client, customer):
    assert client.get("/api/admin/categories").status_code == 401

    response = client.get("/api/admin/categories", headers=auth_headers(customer))
    assert response.status_code == 403
    assert response.json()["detail"] == "Forbidden"


def test_category_crud(client, admin):
    headers = auth_headers(admin)
    for name, order in (("Zucchini", 1), ("Apple", 3), ("Pizza", 2)):
        body = {"name": name, "display_order": order}
        assert client.post("/api/admin/categories", json=body, headers=headers).status_code == 201

    categories = client.get("/api/admin/categories", headers=headers).json()
    assert [c["name"] for c in categories] == ["Zucchini", "Pizza", "Apple"]

    pizza = categories[1]
    response = client.patch(
        f"/api/admin/categories/{pizza['id']}",
        json={"description": "Stone baked"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["description"] == "Stone baked"
    assert response.json()["name"] == "Pizza"

    missing = client.patch("/api/admin/categories/missing", json={"name": "X"}, headers=headers)
    assert missing.status_code == 404


def test_delete_requires_confirmation(client, admin, call):
    headers = auth_headers(admin)
    category = client.post("/api/admin/categories", json={"name": "Sushi"}, headers=headers).json()

    refused = client.delete(f"/api/admin/categories/{category['id']}", headers=headers)
    assert refused.status_code == 409
    assert refused.json()["detail"] == "Confirmation required"
    assert call("count", "categories") == 1

    confirmed = client.delete(f"/api/admin/categories/{category['id']}?confirm=true", headers=headers)
    assert confirmed.status_code == 200
    assert call("count", "categories") == 0

    gone = client.delete(f"/api/admin/categories/{category['id']}?confirm=true", headers=headers)
    assert gone.status_code == 404


def test_food_item_price_defaults_and_filters(client, admin, menu):
    headers = auth_headers(admin)
    assert menu["cheeseburger"]["current_price"] == pytest.approx(12.99)
    assert menu["cheeseburger"]["category"]["name"] == "Burgers"

    zero = client.post(
        "/api/admin/food-items",
        json={"name": "Garlic Bread", "base_price": 5.99, "current_price": 0},
        headers=headers,
    ).json()
    assert zero["current_price"] == pytest.approx(5.99)

    pizzas = client.get(
        "/api/admin/food-items", params={"category_id": menu["pizza"]["id"]}, headers=headers
    ).json()
    assert {item["name"] for item in pizzas} == {"Margherita Pizza", "Pepperoni Pizza"}

    everything = client.get("/api/admin/food-items", params={"category_id": "all"}, headers=headers).json()
    assert len(everything) == 4

    searched = client.get("/api/admin/food-items", params={"search": "MOZZARELLA"}, headers=headers).json()
    assert [item["name"] for item in searched] == ["Margherita Pizza"]

    renamed = client.patch(
        f"/api/admin/food-items/{menu['pepperoni']['id']}",
        json={"name": "Spicy Pepperoni"},
        headers=headers,
    ).json()
    assert renamed["current_price"] == pytest.approx(16.99)


def test_banner_blank_times_are_stored_as_null(client, admin):
    headers = auth_headers(admin)
    banner = client.post("/api/admin/banners", json={
        "title": "Weekend Special",
        "image_url": "https://example.com/banner.jpg",
        "start_time": "",
        "end_time": "",
    }, headers=headers)
    assert banner.status_code == 201
    assert banner.json()["end_time"] is None


def test_orders_list_and_status(client, admin, customer, menu):
    headers = auth_headers(admin)
    customer_headers = auth_headers(customer)
    client.post("/api/cart/items", json={"food_item_id": menu["margherita"]["id"]}, headers=customer_headers)
    order = client.post("/api/cart/checkout", headers=customer_headers).json()

    by_name = client.get("/api/admin/orders", params={"search": "jane"}, headers=headers).json()
    assert [o["id"] for o in by_name] == [order["id"]]
    assert by_name[0]["profile"]["full_name"] == "Jane Doe"
    assert by_name[0]["order_items"][0]["food_item"]["name"] == "Margherita Pizza"

    by_number = client.get("/api/admin/orders", params={"search": order["order_number"][-6:]}, headers=headers).json()
    assert len(by_number) == 1

    assert client.get("/api/admin/orders", params={"status": "delivered"}, headers=headers).json() == []

    response = client.patch(f"/api/admin/orders/{order['id']}/status", json={"status": "delivered"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "delivered"

    invalid = client.patch(f"/api/admin/orders/{order['id']}/status", json={"status": "shipped"}, headers=headers)
    assert invalid.status_code == 422

    missing = client.patch("/api/admin/orders/missing/status", json={"status": "preparing"}, headers=headers)
    assert missing.status_code == 404

    stats = client.get("/api/admin/dashboard", headers=headers).json()
    assert stats == {
        "total_orders": 1,
        "total_users": 2,
        "total_items": 3,
        "revenue": pytest.approx(14.99),
    }


def test_user_directory_and_profiles(client, admin, register):
    headers = auth_headers(admin)
    register(email="sam@example.com", full_name=None, phone="555-0100")

    users = client.get("/api/admin/users", headers=headers).json()
    sam = next(u for u in users if u["email"] == "sam@example.com")
    assert sam["full_name"] == "N/A"
    assert sam["phone"] == "555-0100"
    assert sam["last_sign_in_at"] is not None

    profiles = client.get("/api/admin/profiles", params={"search": "0100"}, headers=headers).json()
    assert [p["email"] for p in profiles] == ["sam@example.com"]


def test_image_upload(client, admin):
    headers = auth_headers(admin)

    response = client.post(
        "/api/admin/uploads",
        files={"file": ("burger.png", b"\x89PNG\r\n\x1a\n", "image/png")},
        headers=headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["path"].endswith(".png")
    assert body["url"] == f"http://testserver/media/food-images/{body['path']}"

    not_image = client.post(
        "/api/admin/uploads",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )
    assert not_image.status_code == 400
    assert not_image.json()["detail"] == "Please upload an image file"
