"""
Identité de l'appelant à partir du jeton Bearer (JWT HS256 signé avec JWT_SECRET).
Deux stratégies distinctes, utilisées comme dépendances FastAPI:
- optional_user: pas de jeton ou jeton invalide => None (création de commande anonyme)
- require_user: pas de jeton ou jeton invalide => Unauthorized (401)
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

import jwt
from fastapi import Depends, Request

from backend.config import Settings
from backend.errors import Unauthorized
from backend.infra.deps import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    user_id: str
    username: Optional[str] = None


def issue_token(user_id: str, username: Optional[str], settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "username": username,
        "iat": now,
        "exp": now + timedelta(hours=settings.jwt_expires_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_identity(token: str, settings: Settings) -> Identity:
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise Unauthorized("Session expirée, veuillez vous connecter") from e
    except jwt.InvalidTokenError as e:
        raise Unauthorized("Jeton invalide") from e
    user_id = claims.get("sub")
    if not user_id:
        raise Unauthorized("Jeton invalide")
    return Identity(user_id=str(user_id), username=claims.get("username"))


def bearer_token(request: Request) -> Optional[str]:
    # "Bearer <jwt>" ou le jeton seul
    header = (request.headers.get("Authorization") or "").strip()
    if header[:7].lower() == "bearer ":
        header = header[7:].strip()
    return header or None


def optional_user(request: Request, settings: Settings = Depends(get_settings)) -> Optional[Identity]:
    token = bearer_token(request)
    if not token:
        return None
    try:
        return decode_identity(token, settings)
    except Unauthorized as e:
        logger.warning("Jeton invalide ignoré (commande anonyme): %s", e.message)
        return None


def require_user(request: Request, settings: Settings = Depends(get_settings)) -> Identity:
    token = bearer_token(request)
    if not token:
        raise Unauthorized("Accès refusé: aucun jeton fourni")
    return decode_identity(token, settings)
