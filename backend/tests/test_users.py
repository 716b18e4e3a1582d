from fastapi.testclient import TestClient

from storefront.auth import TokenService


def _auth(token: str) -> dict:
    return {"Authorization": token}


def test_list_users(client: TestClient, admin_token: str):
    response = client.get("/users", headers=_auth(admin_token))
    assert response.status_code == 200
    users = response.json()
    assert [u["username"] for u in users] == ["admin"]
    # Ensure no password hashes leak
    for u in users:
        assert "password_hash" not in u
        assert set(u) == {"id", "username", "role", "created_at"}


def test_list_users_accepts_bearer_prefix(client: TestClient, admin_token: str):
    response = client.get(
        "/users",
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert response.status_code == 200


def test_list_users_after_register_hides_hash(client: TestClient, admin_token: str):
    client.post("/register", json={"username": "alice", "password": "pw123"})
    users = client.get("/users", headers=_auth(admin_token)).json()
    assert {u["username"] for u in users} == {"admin", "alice"}
    assert all("password_hash" not in u for u in users)


def test_missing_token(client: TestClient):
    response = client.get("/users")
    assert response.status_code == 403
    assert response.json()["detail"] == "Token is required"


def test_invalid_token(client: TestClient):
    response = client.get("/users", headers=_auth("invalid.token.here"))
    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized"


def test_token_signed_with_other_secret(client: TestClient):
    forged = TokenService(secret="someone-else").issue(1, "admin")
    response = client.get("/users", headers=_auth(forged))
    assert response.status_code == 401


def test_expired_token(client: TestClient):
    expired = TokenService(secret="test-secret", expire_minutes=-1).issue(1, "admin")
    response = client.get("/users", headers=_auth(expired))
    assert response.status_code == 401


def test_non_admin_cannot_manage_users(client: TestClient, user_token: str):
    response = client.get("/users", headers=_auth(user_token))
    assert response.status_code == 403

    response = client.delete("/users/1", headers=_auth(user_token))
    assert response.status_code == 403


def test_delete_user(client: TestClient, admin_token: str):
    uid = client.post(
        "/register",
        json={"username": "todelete", "password": "pass"},
    ).json()["id"]

    response = client.delete(f"/users/{uid}", headers=_auth(admin_token))
    assert response.status_code == 204
    assert response.content == b""

    # Verify user gone from list
    users = client.get("/users", headers=_auth(admin_token)).json()
    assert all(u["username"] != "todelete" for u in users)

    # The deleted account can no longer log in
    login = client.post("/login", json={"username": "todelete", "password": "pass"})
    assert login.status_code == 401


def test_delete_nonexistent_user(client: TestClient, admin_token: str):
    response = client.delete("/users/99999", headers=_auth(admin_token))
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


def test_delete_requires_token(client: TestClient):
    response = client.delete("/users/1")
    assert response.status_code == 403


def test_empty_bearer_credential_is_missing_token(client: TestClient):
    for header in ("Bearer ", "Bearer", "bearer   "):
        response = client.get("/users", headers={"Authorization": header})
        assert response.status_code == 403
        assert response.json()["detail"] == "Token is required"
