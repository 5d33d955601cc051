"""Couche d'accès aux données pour le domaine Utilisateurs (table users).
Un utilisateur est un dict {id, username, email, password_hash, created_at}.
- SupabaseUserRepository: lecture/écriture via le client service-role.
- InMemoryUserRepository: dictionnaire en mémoire (dev local, tests).
Contrairement aux lectures « best-effort », les erreurs de stockage remontent
(TransportError / PersistenceError) et sont rendues par les gestionnaires globaux.
"""
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol
from uuid import uuid4
import logging
import threading

import httpx
from postgrest.exceptions import APIError

from backend.config import Settings
from backend.errors import PersistenceError, TransportError, ValidationError

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "Nom d'utilisateur ou email déjà utilisé"
UNIQUE_VIOLATION = "23505"


def public_user(row: Optional[Dict[str, Any]], *fields: str) -> Optional[Dict[str, Any]]:
    """Projection sans password_hash (par défaut: id, username, email)."""
    if not row:
        return None
    keys = fields or ("id", "username", "email")
    return {k: row.get(k) for k in keys}


class UserRepository(Protocol):
    def find_by_email_or_username(self, identifier: str) -> Optional[Dict[str, Any]]: ...

    def exists(self, email: str, username: str) -> bool: ...

    def create(self, username: str, email: str, password_hash: str) -> Dict[str, Any]: ...

    def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]: ...

    def get_many(self, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]: ...


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._users: Dict[str, Dict[str, Any]] = {}
        # RLock: create() appelle exists() en tenant déjà le verrou
        self._lock = threading.RLock()

    def _snapshot(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._users.values())

    def find_by_email_or_username(self, identifier: str) -> Optional[Dict[str, Any]]:
        for row in self._snapshot():
            if identifier in (row["email"], row["username"]):
                return dict(row)
        return None

    def exists(self, email: str, username: str) -> bool:
        return any(r["email"] == email or r["username"] == username for r in self._snapshot())

    def create(self, username: str, email: str, password_hash: str) -> Dict[str, Any]:
        with self._lock:
            # Contrainte d'unicité vérifiée sous verrou (équivalent de l'index unique en base)
            if self.exists(email, username):
                raise ValidationError(DUPLICATE_USER_MESSAGE)
            row = {
                "id": str(uuid4()),
                "username": username,
                "email": email,
                "password_hash": password_hash,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            self._users[row["id"]] = row
        return dict(row)

    def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        row = self._users.get(user_id)
        return dict(row) if row else None

    def get_many(self, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return {uid: dict(self._users[uid]) for uid in set(user_ids) if uid in self._users}


class SupabaseUserRepository:
    table_name = "users"

    def __init__(self, client: Any) -> None:
        self._client = client

    def _table(self):
        return self._client.table(self.table_name)

    def _execute(self, action: str, run: Callable[[], Any]) -> Any:
        try:
            return run()
        except (httpx.TimeoutException, httpx.TransportError) as e:
            logger.exception("users.repository.%s: store unreachable", action)
            raise TransportError("Base de données injoignable") from e
        except APIError as e:
            if getattr(e, "code", None) == UNIQUE_VIOLATION:
                raise ValidationError(DUPLICATE_USER_MESSAGE) from e
            logger.exception("users.repository.%s failed", action)
            raise PersistenceError() from e

    def _find_one(self, action: str, column: str, value: str) -> Optional[Dict[str, Any]]:
        res = self._execute(
            action,
            lambda: self._table().select("*").eq(column, value).limit(1).execute(),
        )
        rows = res.data or []
        return rows[0] if rows else None

    def find_by_email_or_username(self, identifier: str) -> Optional[Dict[str, Any]]:
        # Deux requêtes eq() plutôt qu'un or_() pour ne pas interpoler l'identifiant dans le filtre
        return self._find_one("find_by_email", "email", identifier) or self._find_one(
            "find_by_username", "username", identifier
        )

    def exists(self, email: str, username: str) -> bool:
        return bool(
            self._find_one("exists_email", "email", email)
            or self._find_one("exists_username", "username", username)
        )

    def create(self, username: str, email: str, password_hash: str) -> Dict[str, Any]:
        row = {
            "id": str(uuid4()),
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        res = self._execute("create", lambda: self._table().insert(row).execute())
        rows = res.data or []
        return rows[0] if rows else row

    def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        if not user_id:
            return None
        return self._find_one("get_by_id", "id", user_id)

    def get_many(self, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        ids = sorted({uid for uid in user_ids if uid})
        if not ids:
            return {}
        res = self._execute(
            "get_many",
            lambda: self._table().select("id, username, email").in_("id", ids).execute(),
        )
        return {r["id"]: r for r in res.data or []}


def build_user_repository(settings: Settings) -> UserRepository:
    """Sélectionne le stockage des utilisateurs via DATA_STORE (supabase | memory)."""
    if settings.data_store == "memory":
        return InMemoryUserRepository()
    if settings.data_store == "supabase":
        from backend.infra.supabase_client import get_service_supabase

        return SupabaseUserRepository(get_service_supabase(settings))
    raise ValueError(f"DATA_STORE inconnu: {settings.data_store!r} (attendu: supabase ou memory)")
