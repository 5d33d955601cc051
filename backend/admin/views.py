# module backend.admin.views
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from backend.admin import service as admin_service
from backend.infra.deps import get_order_repository, get_user_repository
from backend.orders.repository import OrderRepository
from backend.users.repository import UserRepository
from backend.utils.security import Identity, require_user

router = APIRouter(prefix="/api", tags=["Admin"])


@router.get("/orders-data")
def orders_data(
    user: Identity = Depends(require_user),
    orders: OrderRepository = Depends(get_order_repository),
    users: UserRepository = Depends(get_user_repository),
) -> List[Dict[str, Any]]:
    """Données du tableau de bord des commandes (jeton requis)."""
    return admin_service.fetch_admin_orders(orders, users)
