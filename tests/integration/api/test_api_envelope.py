from __future__ import annotations

from obravista.core.enums import UserType

API = "/api/v1"


def test_health_uses_the_envelope(client):
    response = client.get(f"{API}/health")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["status"] == "ok"


def test_missing_or_bad_token_is_401(client):
    response = client.get(f"{API}/sites")
    assert response.status_code == 401
    assert response.json()["success"] is False

    response = client.get(f"{API}/sites", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_login_and_me(client, make_user):
    make_user(email="gestor@obra.test", user_type=UserType.USER, permissions={"crm": "editar"})

    response = client.post(f"{API}/auth/login", json={"email": "gestor@obra.test", "password": "wrong-pass"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials."}

    response = client.post(f"{API}/auth/login", json={"email": "gestor@obra.test", "password": "secret123"})
    assert response.status_code == 200
    token = response.json()["data"]["access_token"]

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"}).json()["data"]
    assert me["user"]["email"] == "gestor@obra.test"
    assert me["pages"]["crm"] == "editar"
    assert me["pages"]["obras"] == "visualizar"
    assert me["pages"]["usuarios"] == "bloqueado"


def test_page_permissions_are_enforced(client, make_user, headers_for):
    viewer = headers_for(make_user(email="viewer@obra.test", user_type=UserType.USER))

    assert client.get(f"{API}/sites", headers=viewer).status_code == 200
    response = client.post(f"{API}/sites", json={"name": "Nova obra"}, headers=viewer)
    assert response.status_code == 403
    assert response.json()["success"] is False
    assert client.get(f"{API}/crm/deals", headers=viewer).status_code == 403


def test_not_found_and_validation_envelopes(client, admin_headers):
    response = client.get(f"{API}/sites/999", headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Site 999 not found."}

    response = client.post(f"{API}/sites", json={}, headers=admin_headers)
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert "name" in body["message"]


def test_admin_creates_users(client, admin_headers):
    payload = {"name": "Rita", "email": "rita@obra.test", "password": "segredo1", "custom_permissions": {"kanban": "criar"}}
    response = client.post(f"{API}/users", json=payload, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["data"]["custom_permissions"] == {"kanban": "gerenciar"}

    response = client.post(f"{API}/users", json=payload, headers=admin_headers)
    assert response.status_code == 400
