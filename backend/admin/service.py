# module backend.admin.service

from typing import Any, Dict, List
import logging

from backend.orders.repository import OrderRepository
from backend.users.repository import UserRepository, public_user

logger = logging.getLogger(__name__)

ADMIN_ORDERS_LIMIT = 500


def fetch_admin_orders(
    orders: OrderRepository,
    users: UserRepository,
    limit: int = ADMIN_ORDERS_LIMIT,
) -> List[Dict[str, Any]]:
    """Toutes les commandes, la plus récente d'abord, chacune avec user{id, username} ou null.
    Les propriétaires sont chargés en une seule requête (get_many).
    """
    rows = orders.list_all(limit=limit)
    owners = users.get_many(o.user_id for o in rows if o.user_id)
    result = []
    for order in rows:
        data = order.to_public()
        data["user"] = public_user(owners.get(order.user_id), "id", "username")
        result.append(data)
    logger.debug("admin.orders count=%d", len(result))
    return result
