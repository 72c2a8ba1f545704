from conftest import auth_headers


def test_register_signs_in_and_creates_profile(client, register, call):
    session = register(email="Jane@Example.com ", full_name="Jane Doe", phone="555-0199")

    assert session["token_type"] == "bearer"
    assert session["user"]["is_admin"] is False

    me = client.get("/api/auth/me", headers=auth_headers(session)).json()
    assert me["email"] == "jane@example.com"

    profile = call("select_one", "user_profiles", {"id": session["user"]["id"]})
    assert profile["full_name"] == "Jane Doe"
    assert profile["preferred_language"] == "en"


def test_register_validation(client, register):
    mismatch = client.post("/api/auth/register", json={
        "email": "a@example.com", "password": "secret123", "confirm_password": "secret124",
    })
    assert mismatch.status_code == 400
    assert mismatch.json()["detail"] == "Passwords do not match"

    short = client.post("/api/auth/register", json={"email": "a@example.com", "password": "abc"})
    assert short.status_code == 400
    assert short.json()["detail"] == "Password must be at least 6 characters"

    bad_email = client.post("/api/auth/register", json={"email": "not-an-email", "password": "secret123"})
    assert bad_email.status_code == 422

    register(email="dup@example.com")
    duplicate = client.post("/api/auth/register", json={"email": "dup@example.com", "password": "secret123"})
    assert duplicate.status_code == 400


def test_login(client, customer):
    ok = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.json()["access_token"] != customer["access_token"]

    wrong = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "nope12345"})
    assert wrong.status_code == 400


def test_me_requires_valid_token(client):
    assert client.get("/api/auth/me").status_code == 401
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer forged"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_admin_login_gate(client, customer, admin):
    refused = client.post("/api/admin/login", json={"email": "jane@example.com", "password": "secret123"})
    assert refused.status_code == 403
    assert refused.json()["detail"] == "Access denied. Admin privileges required."

    allowed = client.post("/api/admin/login", json={"email": "admin@example.com", "password": "secret123"})
    assert allowed.status_code == 200
    assert allowed.json()["user"]["is_admin"] is True
