"""
ASGI entrypoint: expose `app` for process managers / deployments.

- En production, un process manager (ex: gunicorn avec uvicorn workers) importe `backend.asgi:app`.
- La configuration de FastAPI est centralisée dans backend.app_setup; ce fichier ne fait qu'exposer l'instance.
"""

from backend.app import app

__all__ = ["app"]
