# module backend.app
"""
Instance globale de l'application, construite par la factory à partir du .env.
Toute la configuration (routers, exceptions, lifespan) est centralisée dans backend.app_setup.
"""
from backend.app_setup.factory import create_app

app = create_app()
