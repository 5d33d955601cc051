from fastapi import APIRouter, Depends
from starlette.status import HTTP_201_CREATED

from backend.config import Settings
from backend.infra.deps import get_settings, get_user_repository
from backend.users.repository import UserRepository
from .models import LoginRequest, RegisterRequest
from .service import login as svc_login, register as svc_register

# --- API Router (/api) ---

api_router = APIRouter(prefix="/api", tags=["Auth API"])


@api_router.post("/register", status_code=HTTP_201_CREATED)
def api_register(
    req: RegisterRequest,
    users: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
):
    """Inscription (API JSON).
    - username 3 à 30 caractères, email valide, mot de passe d'au moins 6 caractères (400 sinon).
    - 400 si l'email ou le nom d'utilisateur est déjà pris.
    """
    svc_register(users, settings, req)
    return {"message": "Utilisateur créé avec succès"}


@api_router.post("/login")
def api_login(
    req: LoginRequest,
    users: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
):
    """Connexion (API JSON): retourne {message, token, user{id, username, email}}.
    Le jeton est à renvoyer dans l'en-tête Authorization: Bearer <token>.
    """
    return svc_login(users, settings, req).to_dict()
