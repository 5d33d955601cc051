from backend.utils.security import issue_token


def test_my_orders_requires_token(client):
    assert client.get("/api/my-orders").status_code == 401
    assert client.get("/api/my-orders", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_my_orders_returns_only_own_orders_newest_first(client, cart_payload, auth_headers, create_user, settings):
    bob = create_user("bob", "bob@example.com")
    bob_headers = {"Authorization": f"Bearer {issue_token(bob['id'], 'bob', settings)}"}

    first = client.post("/api/create-order", json=cart_payload(), headers=auth_headers).json()["order"]
    second = client.post("/api/create-order", json=cart_payload(), headers=auth_headers).json()["order"]
    client.post("/api/create-order", json=cart_payload(), headers=bob_headers)
    client.post("/api/create-order", json=cart_payload())

    res = client.get("/api/my-orders", headers=auth_headers)

    assert res.status_code == 200
    ids = [o["orderId"] for o in res.json()]
    assert sorted(ids) == sorted([first["orderId"], second["orderId"]])
    created = [o["createdAt"] for o in res.json()]
    assert created == sorted(created, reverse=True)


def test_orders_data_requires_token(client):
    assert client.get("/api/orders-data").status_code == 401


def test_orders_data_lists_all_orders_with_username(client, cart_payload, auth_headers):
    client.post("/api/create-order", json=cart_payload(), headers=auth_headers)
    client.post("/api/create-order", json=cart_payload())

    res = client.get("/api/orders-data", headers=auth_headers)

    assert res.status_code == 200
    rows = res.json()
    assert len(rows) == 2
    owned = [r for r in rows if r["user"]]
    assert len(owned) == 1
    assert set(owned[0]["user"]) == {"id", "username"}
    assert owned[0]["user"]["username"] == "alice"
    assert [r for r in rows if not r["user"]][0]["userId"] is None
