def test_register_then_login(client):
    res = client.post("/api/register", json={"username": "bob", "email": "bob@example.com", "password": "secret123"})
    assert res.status_code == 201
    assert "message" in res.json()

    res = client.post("/api/login", json={"emailOrUsername": "bob", "password": "secret123"})
    assert res.status_code == 200
    data = res.json()
    assert data["token"]
    assert data["user"]["username"] == "bob"
    assert data["user"]["email"] == "bob@example.com"
    assert "password_hash" not in data["user"]


def test_register_duplicate_returns_400(client, create_user):
    create_user()
    res = client.post("/api/register", json={"username": "alice", "email": "x@example.com", "password": "secret123"})
    assert res.status_code == 400
    assert res.json()["message"]


def test_register_invalid_payload_returns_400(client):
    res = client.post("/api/register", json={"username": "al", "email": "bad", "password": "1"})
    assert res.status_code == 400
    body = res.json()
    assert body["message"]
    assert len(body["errors"]) == 3


def test_login_unknown_user_returns_404(client):
    res = client.post("/api/login", json={"emailOrUsername": "ghost", "password": "secret123"})
    assert res.status_code == 404


def test_login_wrong_password_returns_400(client, create_user):
    create_user()
    res = client.post("/api/login", json={"emailOrUsername": "alice@example.com", "password": "wrong"})
    assert res.status_code == 400
