from brandhub.db import models


def test_user_admin_requires_admin(client, user_headers):
    assert client.get("/api/users/").status_code == 401
    assert client.get("/api/users/", headers=user_headers).status_code == 403


def test_list_users(client, admin_headers, member):
    resp = client.get("/api/users/", headers=admin_headers)
    assert resp.status_code == 200
    usernames = [u["username"] for u in resp.json()]
    assert member[0].username in usernames
    assert all("password_hash" not in u for u in resp.json())


def test_update_user_role_and_deactivate_revokes_sessions(client, admin_headers, member):
    user, headers = member

    resp = client.put(f"/api/users/{user.id}", json={"role": "admin"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["role"] == "admin"

    resp = client.put(f"/api/users/{user.id}", json={"is_active": False}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_cannot_deactivate_self_or_last_admin(client, admin, admin_headers):
    user, _ = admin
    resp = client.put(f"/api/users/{user.id}", json={"is_active": False}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "You cannot deactivate your own account"

    resp = client.put(f"/api/users/{user.id}", json={"role": "user"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "At least one active admin is required"


def test_update_rejects_taken_username(client, admin_headers, make_user):
    first, _ = make_user(models.ROLE_USER)
    second, _ = make_user(models.ROLE_USER)
    resp = client.put(f"/api/users/{second.id}", json={"username": first.username}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Username already in use"


def test_set_password(client, admin_headers, member):
    user, _ = member
    resp = client.put(f"/api/users/{user.id}/password", json={"password": "brand-new"}, headers=admin_headers)
    assert resp.json() == {"message": "Password updated"}
    login = client.post("/api/auth/login", json={"username": user.username, "password": "brand-new"})
    assert login.status_code == 200


def test_delete_user(client, admin, admin_headers, member):
    user, _ = member
    admin_user, _ = admin

    assert client.delete(f"/api/users/{admin_user.id}", headers=admin_headers).status_code == 400
    resp = client.delete(f"/api/users/{user.id}", headers=admin_headers)
    assert resp.json() == {"message": "User deleted"}
    assert client.delete(f"/api/users/{user.id}", headers=admin_headers).status_code == 404
