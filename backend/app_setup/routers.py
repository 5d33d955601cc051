"""
Registre central des routers (tous sous /api).
- Auth: /register, /login
- Users: /my-orders
- Orders: /create-order, /request-payment, /verify-payment, /orders/{id}
- Admin: /orders-data
- Health: /health, /health/store
"""
from fastapi import FastAPI

from backend.admin.views import router as admin_router
from backend.auth.views import api_router as auth_api_router
from backend.health.router import router as health_router
from backend.orders.views import router as orders_router
from backend.users.views import api_router as users_api_router


def register_routers(app: FastAPI) -> None:
    app.include_router(auth_api_router)
    app.include_router(users_api_router)
    app.include_router(orders_router)
    app.include_router(admin_router)
    app.include_router(health_router)
