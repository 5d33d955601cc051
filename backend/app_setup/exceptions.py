"""
Gestionnaires d'exceptions enregistrés par la factory.
- AppError (backend.errors): JSON {message[, detail]} avec le code HTTP de l'erreur.
- RequestValidationError (pydantic): 400 {message, errors}.
- Toute autre exception: journalisée puis 500 générique; le texte de l'erreur
  n'est ajouté qu'en dehors de la production.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from backend.errors import AppError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Erreur interne du serveur"


def _first_error_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Données invalides"
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg") or "Données invalides"
    return f"{field}: {msg}" if field else msg


def _public_errors(exc: RequestValidationError) -> list:
    # ctx peut contenir des objets exception non sérialisables
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
        content = {"message": exc.message}
        if exc.detail is not None:
            content["detail"] = exc.detail
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(content))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=HTTP_400_BAD_REQUEST,
            content=jsonable_encoder({"message": _first_error_message(exc), "errors": _public_errors(exc)}),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"message": GENERIC_ERROR_MESSAGE}
        if not request.app.state.settings.is_production:
            content["error"] = str(exc)
        return JSONResponse(status_code=HTTP_500_INTERNAL_SERVER_ERROR, content=content)
