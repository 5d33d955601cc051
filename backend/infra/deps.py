"""
Dépendances FastAPI: exposent les objets créés au démarrage (lifespan) et
stockés sur app.state (settings, stockages, passerelle).
"""
from fastapi import Depends, Request

from backend.config import Settings
from backend.orders.repository import OrderRepository
from backend.orders.service import OrderService
from backend.payments.gateway import PaymentGateway
from backend.users.repository import UserRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_order_repository(request: Request) -> OrderRepository:
    return request.app.state.order_repository


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.user_repository


def get_payment_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payment_gateway


def get_order_service(
    settings: Settings = Depends(get_settings),
    orders: OrderRepository = Depends(get_order_repository),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> OrderService:
    return OrderService(settings=settings, orders=orders, gateway=gateway)
