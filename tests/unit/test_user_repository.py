import threading
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from backend.errors import PersistenceError, ValidationError
from backend.users.repository import InMemoryUserRepository, SupabaseUserRepository, public_user


def test_in_memory_create_and_lookup():
    repo = InMemoryUserRepository()
    user = repo.create("alice", "alice@example.com", "hash")
    assert repo.find_by_email_or_username("alice")["id"] == user["id"]
    assert repo.find_by_email_or_username("alice@example.com")["id"] == user["id"]
    assert repo.find_by_email_or_username("bob") is None
    assert repo.get_by_id(user["id"])["username"] == "alice"


def test_in_memory_uniqueness_on_email_and_username():
    repo = InMemoryUserRepository()
    repo.create("alice", "alice@example.com", "hash")
    assert repo.exists("other@example.com", "alice") is True
    assert repo.exists("alice@example.com", "other") is True
    with pytest.raises(ValidationError):
        repo.create("alice", "new@example.com", "hash")


def test_in_memory_get_many_skips_unknown_ids():
    repo = InMemoryUserRepository()
    a = repo.create("alice", "alice@example.com", "hash")
    found = repo.get_many([a["id"], "missing", a["id"]])
    assert list(found) == [a["id"]]


def test_in_memory_lookups_while_users_register_concurrently():
    repo = InMemoryUserRepository()
    errors = []

    def writer():
        for i in range(200):
            repo.create(f"user{i}", f"user{i}@example.com", "hash")

    def reader():
        try:
            for i in range(200):
                repo.find_by_email_or_username(f"user{i}@example.com")
                repo.exists("nobody@example.com", "nobody")
        except RuntimeError as e:
            errors.append(e)

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert repo.find_by_email_or_username("user199")["email"] == "user199@example.com"


def test_public_user_never_exposes_hash():
    row = {"id": "1", "username": "alice", "email": "a@x.io", "password_hash": "h"}
    assert public_user(row) == {"id": "1", "username": "alice", "email": "a@x.io"}
    assert public_user(row, "id", "username") == {"id": "1", "username": "alice"}
    assert public_user(None) is None


def _client(data):
    client = MagicMock()
    query = MagicMock()
    client.table.return_value = query
    for name in ("select", "insert", "eq", "in_", "limit"):
        getattr(query, name).return_value = query
    query.execute.return_value = MagicMock(data=data)
    return client, query


def test_supabase_find_by_email_or_username_uses_eq_filters():
    client, query = _client([{"id": "1", "username": "alice"}])
    user = SupabaseUserRepository(client).find_by_email_or_username("alice")
    assert user["id"] == "1"
    query.eq.assert_called_with("email", "alice")


def test_supabase_get_many_uses_in_filter():
    client, query = _client([{"id": "1", "username": "alice", "email": "a@x.io"}])
    found = SupabaseUserRepository(client).get_many(["1", "1", None])
    assert found == {"1": {"id": "1", "username": "alice", "email": "a@x.io"}}
    query.in_.assert_called_once_with("id", ["1"])


def test_supabase_get_many_empty_makes_no_query():
    client, query = _client([])
    assert SupabaseUserRepository(client).get_many([]) == {}
    query.execute.assert_not_called()


def test_supabase_unique_violation_is_validation_error():
    client, query = _client([])
    query.execute.side_effect = APIError({"message": "duplicate key", "code": "23505"})
    with pytest.raises(ValidationError):
        SupabaseUserRepository(client).create("alice", "alice@example.com", "hash")


def test_supabase_other_api_error_is_persistence_error():
    client, query = _client([])
    query.execute.side_effect = APIError({"message": "boom", "code": "XX000"})
    with pytest.raises(PersistenceError) as exc:
        SupabaseUserRepository(client).get_by_id("1")
    assert exc.value.detail is None
