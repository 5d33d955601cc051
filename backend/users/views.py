# module backend.users.views

"""Vues API destinées aux utilisateurs authentifiés.
- Mes commandes: liste des commandes de l'utilisateur courant, la plus récente d'abord.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from backend.infra.deps import get_order_service
from backend.orders.service import OrderService
from backend.utils.security import Identity, require_user

api_router = APIRouter(prefix="/api", tags=["Users API"])


@api_router.get("/my-orders")
def my_orders(
    user: Identity = Depends(require_user),
    service: OrderService = Depends(get_order_service),
) -> List[Dict[str, Any]]:
    return [o.to_public() for o in service.list_user_orders(user.user_id)]
