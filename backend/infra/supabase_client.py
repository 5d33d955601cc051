from typing import Dict, Tuple
from supabase import create_client, Client
from backend.config import Settings

_service_clients: Dict[Tuple[str, str], Client] = {}


def get_service_supabase(settings: Settings) -> Client:
    """
    Client Supabase 'service-role' (bypass RLS) pour les tables orders et users.
    Une instance par (url, clé), créée au premier appel.
    """
    if not settings.supabase_url or not settings.supabase_service_key:
        raise RuntimeError("SUPABASE_URL ou SUPABASE_SERVICE_KEY manquant pour get_service_supabase()")
    key = (settings.supabase_url, settings.supabase_service_key)
    if key not in _service_clients:
        _service_clients[key] = create_client(*key)
    return _service_clients[key]
