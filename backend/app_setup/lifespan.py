"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Crée les stockages (commandes, utilisateurs) et la passerelle de paiement une seule fois
  et les expose sur app.state pour les dépendances (backend.infra.deps).
- À l'arrêt, ferme le client HTTP de la passerelle.
Les objets déjà présents sur app.state (ex: doublures injectées par les tests) sont conservés.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.orders.repository import build_order_repository
from backend.payments.factory import build_payment_gateway
from backend.users.repository import build_user_repository


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("uvicorn.error")
    settings = app.state.settings

    if getattr(app.state, "order_repository", None) is None:
        app.state.order_repository = build_order_repository(settings)
    if getattr(app.state, "user_repository", None) is None:
        app.state.user_repository = build_user_repository(settings)
    if getattr(app.state, "payment_gateway", None) is None:
        app.state.payment_gateway = build_payment_gateway(settings)

    logger.info(
        "Backend started (env=%s, store=%s, gateway=%s)",
        settings.environment,
        settings.data_store,
        app.state.payment_gateway.name,
    )
    try:
        yield
    finally:
        await app.state.payment_gateway.aclose()
        logger.info("Payment gateway closed")
