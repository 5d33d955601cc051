"""
Lancement local du backend: `python -m backend` (ou le script `orders-backend`).

Uvicorn sert backend.asgi:app sur 0.0.0.0 et lit:
- PORT (8000 par défaut)
- UVICORN_RELOAD: "1", "true" ou "yes" pour le rechargement automatique en dev
- LOG_LEVEL: niveau de logs uvicorn ("info" par défaut)
"""
import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "backend.asgi:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8000)),
        reload=os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes"),
        log_level=os.environ.get("LOG_LEVEL", "info"),
    )


if __name__ == "__main__":
    main()
