"""
Factory d'application pour les entrypoints (backend.app, backend.asgi) et les tests.
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from typing import Optional

from fastapi import FastAPI

from backend.config import Settings, load_settings
from .exceptions import register_exception_handlers
from .lifespan import lifespan
from .routers import register_routers


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - la configuration (Settings) sur app.state, chargée depuis l'environnement si absente
      - les gestionnaires d'exceptions
      - tous les routers de l'API
    Les stockages et la passerelle sont créés au démarrage (lifespan).
    """
    settings = settings or load_settings()
    app = FastAPI(title="Orders & Payments API", lifespan=lifespan)
    app.state.settings = settings
    app.state.order_repository = None
    app.state.user_repository = None
    app.state.payment_gateway = None
    register_exception_handlers(app)
    register_routers(app)
    return app
