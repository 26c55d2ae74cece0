from recipe_book.auth import issue_token
from recipe_book.config import Settings

USER = {"email": "cook@example.com", "password": "s3cret"}


def _register_and_login(client):
    client.post("/users", json=USER)
    resp = client.post("/login", json=USER)
    assert resp.status_code == 200
    return resp.json()["accessToken"]


def test_register(client, db):
    resp = client.post("/users", json=USER)
    assert resp.status_code == 200
    assert len(resp.json()["new_user_id"]) == 24

    stored = db.users.find_one({"email": "cook@example.com"})
    assert stored["password"] != "s3cret"
    assert stored["password"].startswith("$2")


def test_register_duplicate_email(client):
    client.post("/users", json=USER)
    resp = client.post("/users", json={"email": "COOK@example.com", "password": "other"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Email is already registered"}


def test_register_missing_password(client):
    resp = client.post("/users", json={"email": "cook@example.com"})
    assert resp.status_code == 400
    assert "password" in resp.json()["error"]


def test_login_wrong_password(client):
    client.post("/users", json=USER)
    resp = client.post("/login", json={**USER, "password": "wrong"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid login"}


def test_login_unknown_user(client):
    resp = client.post("/login", json=USER)
    assert resp.status_code == 401


def test_protected_with_token(client):
    token = _register_and_login(client)
    resp = client.get("/protected", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == "cook@example.com"


def test_protected_without_token(client):
    resp = client.get("/protected")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Not authenticated"}


def test_protected_wrong_scheme(client):
    token = _register_and_login(client)
    resp = client.get("/protected", headers={"Authorization": f"Token {token}"})
    assert resp.status_code == 401


def test_protected_tampered_token(client):
    token = _register_and_login(client)
    resp = client.get("/protected", headers={"Authorization": f"Bearer {token}x"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid token"}


def test_protected_token_from_other_secret(client):
    token = issue_token({"user_id": "1", "email": "x@example.com"}, Settings(token_secret="other"))
    resp = client.get("/protected", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
