from dataclasses import replace
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from backend.app_setup.factory import create_app


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_health_store_memory(client):
    res = client.get("/api/health/store")
    assert res.status_code == 200
    assert res.json()["store"] == "memory"
    assert res.json()["connect_ok"] is True


def test_health_store_supabase_reports_tables(monkeypatch, settings):
    fake_client = MagicMock()
    fake_client.table.return_value.select.return_value.limit.return_value.execute.return_value = MagicMock(data=[{"id": "1"}])
    monkeypatch.setattr("backend.infra.supabase_client.get_service_supabase", lambda s: fake_client)
    monkeypatch.setattr("backend.health.service._check_dns", lambda host: {"dns_ok": True, "dns_error": None})

    from backend.health.service import health_store_info

    info = health_store_info(replace(settings, data_store="supabase", supabase_url="https://proj.supabase.co"))
    assert info["connect_ok"] is True
    assert info["hostname"] == "proj.supabase.co"
    assert info["tables"]["orders"] == {"ok": True, "rows": 1}
    assert info["tables"]["users"] == {"ok": True, "rows": 1}


def _app_with_crashing_store(settings, order_repo, user_repo, gateway):
    app = create_app(settings)
    app.state.order_repository = order_repo
    app.state.user_repository = user_repo
    app.state.payment_gateway = gateway

    def _boom(order_id):
        raise RuntimeError("secret internal failure")

    order_repo.find_by_external_id = _boom
    return app


def test_unexpected_error_is_generic_500_with_text_outside_production(settings, order_repo, user_repo, gateway):
    app = _app_with_crashing_store(settings, order_repo, user_repo, gateway)
    with TestClient(app, raise_server_exceptions=False) as c:
        res = c.post("/api/request-payment", json={"orderId": "ORD-1"})
    assert res.status_code == 500
    assert res.json()["message"]
    assert "secret internal failure" in res.json()["error"]


def test_unexpected_error_hides_text_in_production(settings, order_repo, user_repo, gateway):
    prod = replace(settings, environment="production")
    app = _app_with_crashing_store(prod, order_repo, user_repo, gateway)
    with TestClient(app, raise_server_exceptions=False) as c:
        res = c.post("/api/request-payment", json={"orderId": "ORD-1"})
    assert res.status_code == 500
    assert "error" not in res.json()
    assert "secret" not in res.text


def test_lifespan_builds_store_and_gateway_from_settings(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        assert c.get("/api/health").status_code == 200
        assert app.state.payment_gateway.name == "fake"
        assert app.state.order_repository is not None
        assert app.state.user_repository is not None


def test_store_error_does_not_leak_database_message_in_production(settings, order_repo, gateway):
    from postgrest.exceptions import APIError

    from backend.users.repository import SupabaseUserRepository

    query = MagicMock()
    for method in ("select", "insert", "eq", "in_", "limit", "order"):
        getattr(query, method).return_value = query
    query.execute.side_effect = APIError({"message": 'column "password_hash" does not exist', "code": "42703"})
    supabase = MagicMock()
    supabase.table.return_value = query

    app = create_app(replace(settings, environment="production"))
    app.state.order_repository = order_repo
    app.state.user_repository = SupabaseUserRepository(supabase)
    app.state.payment_gateway = gateway
    with TestClient(app, raise_server_exceptions=False) as c:
        res = c.post("/api/login", json={"emailOrUsername": "alice", "password": "secret123"})
    assert res.status_code == 500
    assert res.json()["message"]
    assert "detail" not in res.json()
    assert "password_hash" not in res.text
