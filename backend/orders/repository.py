# module backend.orders.repository
"""
Accès aux données des commandes.
- OrderRepository: contrat commun (create / find / save / list).
- SupabaseOrderRepository: table 'orders' via le client service-role.
- InMemoryOrderRepository: dictionnaire en mémoire (dev local, tests).
save() applique un contrôle de version optimiste: l'écriture n'a lieu que si la
version stockée est celle lue par l'appelant, sinon ConflictError.
"""
from typing import Any, Callable, Dict, List, Optional, Protocol
from uuid import uuid4
import logging
import threading

import httpx
from postgrest.exceptions import APIError

from backend.config import Settings
from backend.errors import ConflictError, PersistenceError, TransportError
from backend.orders.models import Order

logger = logging.getLogger(__name__)


class OrderRepository(Protocol):
    def create(self, order: Order) -> Order: ...

    def find_by_id(self, internal_id: str) -> Optional[Order]: ...

    def find_by_external_id(self, order_id: str) -> Optional[Order]: ...

    def find_by_external_id_and_authority(self, order_id: str, authority: str) -> Optional[Order]: ...

    def save(self, order: Order) -> None: ...

    def list_by_user(self, user_id: str) -> List[Order]: ...

    def list_all(self, limit: int = 500) -> List[Order]: ...


class InMemoryOrderRepository:
    def __init__(self) -> None:
        self._orders: Dict[str, Order] = {}
        self._by_external_id: Dict[str, str] = {}
        self._lock = threading.Lock()

    def create(self, order: Order) -> Order:
        stored = order.model_copy(deep=True)
        stored.id = str(uuid4())
        stored.version = 1
        with self._lock:
            self._orders[stored.id] = stored
            self._by_external_id[stored.order_id] = stored.id
        return stored.model_copy(deep=True)

    def _snapshot(self) -> List[Order]:
        # save() remplace les objets stockés sans les muter: une copie de la liste suffit
        with self._lock:
            return list(self._orders.values())

    def find_by_id(self, internal_id: str) -> Optional[Order]:
        order = self._orders.get(internal_id)
        return order.model_copy(deep=True) if order else None

    def find_by_external_id(self, order_id: str) -> Optional[Order]:
        internal_id = self._by_external_id.get(order_id)
        return self.find_by_id(internal_id) if internal_id else None

    def find_by_external_id_and_authority(self, order_id: str, authority: str) -> Optional[Order]:
        order = self.find_by_external_id(order_id)
        if order and order.payment_authority == authority:
            return order
        return None

    def save(self, order: Order) -> None:
        with self._lock:
            current = self._orders.get(order.id or "")
            if current is None:
                raise PersistenceError(f"Commande {order.id} absente du stockage")
            if current.version != order.version:
                raise ConflictError()
            stored = order.model_copy(deep=True)
            stored.version = order.version + 1
            self._orders[stored.id] = stored
        order.version = stored.version

    def list_by_user(self, user_id: str) -> List[Order]:
        rows = [o for o in self._snapshot() if o.user_id == user_id]
        return [o.model_copy(deep=True) for o in sorted(rows, key=lambda o: o.created_at, reverse=True)]

    def list_all(self, limit: int = 500) -> List[Order]:
        rows = sorted(self._snapshot(), key=lambda o: o.created_at, reverse=True)
        return [o.model_copy(deep=True) for o in rows[:limit]]


class SupabaseOrderRepository:
    table_name = "orders"

    def __init__(self, client: Any) -> None:
        self._client = client

    def _table(self):
        return self._client.table(self.table_name)

    def _execute(self, action: str, run: Callable[[], Any]) -> Any:
        try:
            return run()
        except (httpx.TimeoutException, httpx.TransportError) as e:
            logger.exception("orders.repository.%s: store unreachable", action)
            raise TransportError("Base de données injoignable") from e
        except APIError as e:
            logger.exception("orders.repository.%s failed", action)
            raise PersistenceError() from e

    def _first(self, res: Any) -> Optional[Order]:
        rows = res.data or []
        return Order.from_row(rows[0]) if rows else None

    def create(self, order: Order) -> Order:
        row = order.to_row()
        row["id"] = str(uuid4())
        row["version"] = 1
        res = self._execute("create", lambda: self._table().insert(row).execute())
        return self._first(res) or Order.from_row(row)

    def find_by_id(self, internal_id: str) -> Optional[Order]:
        res = self._execute(
            "find_by_id",
            lambda: self._table().select("*").eq("id", internal_id).limit(1).execute(),
        )
        return self._first(res)

    def find_by_external_id(self, order_id: str) -> Optional[Order]:
        res = self._execute(
            "find_by_external_id",
            lambda: self._table().select("*").eq("order_id", order_id).limit(1).execute(),
        )
        return self._first(res)

    def find_by_external_id_and_authority(self, order_id: str, authority: str) -> Optional[Order]:
        res = self._execute(
            "find_by_external_id_and_authority",
            lambda: (
                self._table()
                .select("*")
                .eq("order_id", order_id)
                .eq("payment_authority", authority)
                .limit(1)
                .execute()
            ),
        )
        return self._first(res)

    def save(self, order: Order) -> None:
        row = order.to_row()
        row.pop("id", None)
        row["version"] = order.version + 1
        res = self._execute(
            "save",
            lambda: (
                self._table()
                .update(row)
                .eq("id", order.id)
                .eq("version", order.version)
                .execute()
            ),
        )
        if not res.data:
            raise ConflictError()
        order.version += 1

    def list_by_user(self, user_id: str) -> List[Order]:
        res = self._execute(
            "list_by_user",
            lambda: (
                self._table()
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            ),
        )
        return [Order.from_row(r) for r in res.data or []]

    def list_all(self, limit: int = 500) -> List[Order]:
        res = self._execute(
            "list_all",
            lambda: self._table().select("*").order("created_at", desc=True).limit(limit).execute(),
        )
        return [Order.from_row(r) for r in res.data or []]


def build_order_repository(settings: Settings) -> OrderRepository:
    """Sélectionne le stockage des commandes via DATA_STORE (supabase | memory)."""
    if settings.data_store == "memory":
        return InMemoryOrderRepository()
    if settings.data_store == "supabase":
        from backend.infra.supabase_client import get_service_supabase

        return SupabaseOrderRepository(get_service_supabase(settings))
    raise ValueError(f"DATA_STORE inconnu: {settings.data_store!r} (attendu: supabase ou memory)")
