"""
Shared fixtures.

Every test gets its own SQLite file under ``tmp_path``. HTTP tests run the
real application with that gateway placed on ``app.state`` and with the
hosted providers swapped for their development stand-ins.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from foodzy.main import app
from foodzy.services.assistant import RuleBasedChatModel, get_chat_model
from foodzy.services.email import MockEmailService, get_email_service
from foodzy.services.gateway import LocalDataGateway
from foodzy.services.translation import MockTranslationService, get_translation_service


def make_gateway(tmp_path) -> LocalDataGateway:
    return LocalDataGateway(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'foodzy-test.db'}",
        media_root=tmp_path / "media",
        base_url="http://testserver",
        hash_rounds=4,
    )


def auth_headers(session: dict) -> dict:
    return {"Authorization": f"Bearer {session['access_token']}"}


# =============================================================================
# SERVICE-LEVEL FIXTURES
# =============================================================================

@pytest_asyncio.fixture
async def gateway(tmp_path):
    gw = make_gateway(tmp_path)
    await gw.initialize()
    yield gw
    await gw.close()


@pytest.fixture
def food_factory(gateway):
    async def create(name="Classic Cheeseburger", price=12.99, **extra):
        row = {"name": name, "base_price": price, "current_price": price, **extra}
        return (await gateway.insert("food_items", row))[0]
    return create


# =============================================================================
# HTTP FIXTURES
# =============================================================================

@pytest.fixture
def email_service():
    return MockEmailService(failure_rate=0.0, latency=(0.0, 0.0))


@pytest.fixture
def client(tmp_path, email_service):
    app.state.gateway = make_gateway(tmp_path)
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_chat_model] = lambda: RuleBasedChatModel()
    app.dependency_overrides[get_translation_service] = lambda: MockTranslationService()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def call(client):
    """Run a gateway coroutine on the application's event loop."""
    def run(method: str, *args):
        return client.portal.call(getattr(client.app.state.gateway, method), *args)
    return run


@pytest.fixture
def register(client):
    def create(email="jane@example.com", password="secret123", full_name="Jane Doe", phone=None):
        response = client.post("/api/auth/register", json={
            "email": email,
            "password": password,
            "confirm_password": password,
            "full_name": full_name,
            "phone": phone,
        })
        assert response.status_code == 201, response.text
        return response.json()
    return create


@pytest.fixture
def customer(register):
    return register()


@pytest.fixture
def admin(register, call):
    session = register(email="admin@example.com", full_name="Admin")
    call("insert", "admin_users", {"id": session["user"]["id"], "role": "admin"})
    return session


@pytest.fixture
def menu(client, admin):
    """Two categories and three food items created through the admin API."""
    headers = auth_headers(admin)

    def post(path, body):
        response = client.post(path, json=body, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    burgers = post("/api/admin/categories", {"name": "Burgers", "display_order": 1})
    pizza = post("/api/admin/categories", {"name": "Pizza", "display_order": 2})
    return {
        "burgers": burgers,
        "pizza": pizza,
        "cheeseburger": post("/api/admin/food-items", {
            "name": "Classic Cheeseburger",
            "description": "Juicy beef patty with cheddar cheese, lettuce, tomato, and our secret sauce.",
            "base_price": 12.99,
            "category_id": burgers["id"],
        }),
        "margherita": post("/api/admin/food-items", {
            "name": "Margherita Pizza",
            "description": "Fresh basil, mozzarella cheese, and tomato sauce on a crispy crust.",
            "base_price": 14.99,
            "category_id": pizza["id"],
            "is_vegetarian": True,
        }),
        "pepperoni": post("/api/admin/food-items", {
            "name": "Pepperoni Pizza",
            "base_price": 16.99,
            "category_id": pizza["id"],
        }),
    }
