# backend.config
"""
Configuration centrale du backend.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise les secrets/URLs (JWT, Zarinpal, Supabase)
- Construit un objet Settings immuable, créé une seule fois au démarrage
  puis injecté (app.state.settings) dans les services et dépendances
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"

ZARINPAL_REQUEST_URL = "https://api.zarinpal.com/pg/v4/payment/request.json"
ZARINPAL_VERIFY_URL = "https://api.zarinpal.com/pg/v4/payment/verify.json"
ZARINPAL_STARTPAY_URL = "https://www.zarinpal.com/pg/StartPay/"


class ConfigError(RuntimeError):
    """Configuration invalide ou incomplète au démarrage."""


def _clean_env(v: Optional[str]) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expires_hours: int = 24
    environment: str = "development"

    # Passerelle de paiement
    payment_gateway: str = "zarinpal"
    zarinpal_merchant_id: str = ""
    zarinpal_callback_url: str = ""
    zarinpal_request_url: str = ZARINPAL_REQUEST_URL
    zarinpal_verify_url: str = ZARINPAL_VERIFY_URL
    zarinpal_startpay_url: str = ZARINPAL_STARTPAY_URL
    gateway_timeout_seconds: float = 10.0

    # Tarification
    shipping_cost: int = 50000
    amount_tolerance: int = 1

    # Stockage
    data_store: str = "supabase"
    supabase_url: str = ""
    supabase_service_key: str = ""

    bcrypt_rounds: int = 10

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Construit Settings à partir de l'environnement (après chargement du .env).
    - JWT_SECRET est obligatoire (ConfigError sinon)
    - En production, ZARINPAL_MERCHANT_ID et ZARINPAL_CALLBACK_URL sont obligatoires
    - SUPABASE_URL sans schéma est préfixée en https://
    """
    if environ is None:
        load_dotenv(dotenv_path=ENV_PATH, override=False)
        environ = os.environ

    def env(key: str, default: str = "") -> str:
        return _clean_env(environ.get(key)) or default

    environment = (env("APP_ENV") or env("NODE_ENV") or "development").lower()
    jwt_secret = env("JWT_SECRET")
    if not jwt_secret:
        raise ConfigError("JWT_SECRET manquant: définissez-le dans le fichier .env")

    merchant_id = env("ZARINPAL_MERCHANT_ID")
    callback_url = env("ZARINPAL_CALLBACK_URL")
    if environment == "production" and (not merchant_id or not callback_url):
        raise ConfigError(
            "En production, ZARINPAL_MERCHANT_ID et ZARINPAL_CALLBACK_URL sont obligatoires"
        )

    supabase_url = env("SUPABASE_URL") or env("NEXT_PUBLIC_SUPABASE_URL")
    if supabase_url and not supabase_url.startswith("http"):
        supabase_url = "https://" + supabase_url
    supabase_url = supabase_url.rstrip("/")

    try:
        return Settings(
            jwt_secret=jwt_secret,
            jwt_expires_hours=int(env("JWT_EXPIRES_HOURS", "24")),
            environment=environment,
            payment_gateway=env("PAYMENT_GATEWAY", "zarinpal").lower(),
            zarinpal_merchant_id=merchant_id,
            zarinpal_callback_url=callback_url,
            zarinpal_request_url=env("ZARINPAL_REQUEST_URL", ZARINPAL_REQUEST_URL),
            zarinpal_verify_url=env("ZARINPAL_VERIFY_URL", ZARINPAL_VERIFY_URL),
            zarinpal_startpay_url=env("ZARINPAL_STARTPAY_URL", ZARINPAL_STARTPAY_URL),
            gateway_timeout_seconds=float(env("GATEWAY_TIMEOUT_SECONDS", "10")),
            shipping_cost=int(env("SHIPPING_COST", "50000")),
            amount_tolerance=int(env("AMOUNT_TOLERANCE", "1")),
            data_store=env("DATA_STORE", "supabase").lower(),
            supabase_url=supabase_url,
            supabase_service_key=env("SUPABASE_SERVICE_KEY"),
            bcrypt_rounds=int(env("BCRYPT_ROUNDS", "10")),
        )
    except ValueError as e:
        raise ConfigError(f"Valeur numérique invalide dans la configuration: {e}") from e
