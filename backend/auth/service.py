"""Cas d'usage Auth: inscription et connexion.
- Les mots de passe sont hachés avec bcrypt (coût BCRYPT_ROUNDS, 10 par défaut).
- La connexion émet un JWT HS256 (sub, username, exp 24 h) via backend.utils.security.
- Les erreurs sont levées (ValidationError / NotFoundError) et rendues en JSON par les handlers.
"""
from typing import Optional
import logging

import bcrypt

from backend.auth.models import AuthResponse, LoginRequest, RegisterRequest
from backend.config import Settings
from backend.errors import NotFoundError, ValidationError
from backend.users.repository import DUPLICATE_USER_MESSAGE, UserRepository, public_user
from backend.utils.security import issue_token

logger = logging.getLogger(__name__)

# bcrypt ne considère que les 72 premiers octets
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))


def register(users: UserRepository, settings: Settings, req: RegisterRequest) -> dict:
    """Inscription:
    - Refuse si l'email ou le nom d'utilisateur existe déjà (400)
    - Stocke uniquement le hash bcrypt
    - Retourne l'utilisateur sans le hash
    """
    email = str(req.email)
    if users.exists(email, req.username):
        raise ValidationError(DUPLICATE_USER_MESSAGE)
    row = users.create(
        username=req.username,
        email=email,
        password_hash=hash_password(req.password, settings.bcrypt_rounds),
    )
    logger.info("auth.register user_id=%s username=%s", row.get("id"), row.get("username"))
    return public_user(row)


def login(users: UserRepository, settings: Settings, req: LoginRequest) -> AuthResponse:
    """Connexion par email ou nom d'utilisateur.
    - 404 si aucun utilisateur ne correspond
    - 400 si le mot de passe est incorrect
    """
    identifier = req.email_or_username.strip()
    user = users.find_by_email_or_username(identifier)
    if not user:
        raise NotFoundError("Utilisateur introuvable")
    if not verify_password(req.password, user.get("password_hash")):
        logger.warning("auth.login bad password for user_id=%s", user.get("id"))
        raise ValidationError("Mot de passe incorrect")

    token = issue_token(user["id"], user.get("username"), settings)
    return AuthResponse(token=token, user=public_user(user))
