import json


def test_login(client):
    ok = client.post("/api/admin/login", json={"email": "admin@example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.get_json() == {"success": True, "token": "test-admin-token"}

    bad = client.post("/api/admin/login", json={"email": "admin@example.com", "password": "nope"})
    assert bad.status_code == 401


def test_admin_routes_are_guarded(client):
    assert client.get("/api/admin/stats").status_code == 401
    assert client.get("/api/admin/shipping").status_code == 401
    assert client.put("/api/admin/shipping", json={"standard_shipping": 1}).status_code == 401
    assert client.post("/api/admin/seed").status_code == 401


def test_raw_token_header_is_accepted(client):
    assert client.get("/api/admin/stats", headers={"Authorization": "test-admin-token"}).status_code == 200


def test_update_credentials(client, config):
    wrong = client.post(
        "/api/admin/update-credentials",
        json={"current_email": "admin@example.com", "current_password": "bad"},
    )
    assert wrong.status_code == 401

    short = client.post(
        "/api/admin/update-credentials",
        json={
            "current_email": "admin@example.com",
            "current_password": "secret123",
            "new_email": "owner@example.com",
            "new_password": "123",
        },
    )
    assert short.status_code == 400

    resp = client.post(
        "/api/admin/update-credentials",
        json={
            "current_email": "admin@example.com",
            "current_password": "secret123",
            "new_email": "owner@example.com",
            "new_password": "better-pass",
        },
    )
    assert resp.status_code == 200
    stored = json.loads(config.admin_credentials_file.read_text(encoding="utf-8"))
    assert stored["email"] == "owner@example.com"

    login = client.post("/api/admin/login", json={"email": "owner@example.com", "password": "better-pass"})
    assert login.status_code == 200


def test_seed_and_stats(client, admin_headers):
    resp = client.post("/api/admin/seed", json={}, headers=admin_headers)
    assert resp.get_json()["seeded"] == {"categories": 3, "products": 7}

    again = client.post("/api/admin/seed", json={}, headers=admin_headers)
    assert again.get_json()["seeded"] == {"categories": 0, "products": 0}

    forced = client.post("/api/admin/seed", json={"force": True}, headers=admin_headers)
    assert forced.get_json()["seeded"] == {"categories": 3, "products": 7}

    client.post(
        "/api/orders",
        json={
            "customer_name": "Sara",
            "customer_email": "sara@example.com",
            "customer_address": "1 Clifton",
            "customer_city": "Karachi",
            "customer_state": "Sindh",
            "customer_zip": "75600",
            "items": "[]",
            "subtotal": "1000.50",
            "tax": "0",
            "shipping": "150",
            "total": "1150.50",
        },
    )

    stats = client.get("/api/admin/stats", headers=admin_headers).get_json()
    assert stats == {
        "total_products": 7,
        "total_orders": 1,
        "total_categories": 3,
        "total_revenue": "1150.50",
        "currency": "PKR",
    }

    featured = client.get("/api/products/featured").get_json()
    assert {p["name"] for p in featured} == {"Elegant Formal Dress", "Cute Baby Dress", "Gold Plated Necklace"}


def test_admin_shipping_update(client, admin_headers):
    resp = client.put(
        "/api/admin/shipping",
        json={"free_shipping_threshold": 3000, "express_shipping": "fast"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    settings = client.get("/api/admin/shipping", headers=admin_headers).get_json()
    assert settings["free_shipping_threshold"] == 3000
    assert settings["express_shipping"] == "fast"
    assert client.get("/api/shipping").get_json() == settings

    bad = client.put("/api/admin/shipping", json=["x"], headers=admin_headers)
    assert bad.status_code == 400
