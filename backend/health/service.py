"""Diagnostic du stockage pour /api/health/store.
Les échecs sont rapportés dans la réponse (ok: False + error) au lieu d'être levés:
ce point de contrôle doit répondre même quand le stockage est indisponible.
"""
from typing import Any, Dict
from urllib.parse import urlparse
import socket

import httpx
from postgrest.exceptions import APIError

from backend.config import Settings

STORE_TABLES = ("users", "orders")


def _check_table(client: Any, name: str) -> Dict[str, Any]:
    try:
        res = client.table(name).select("id").limit(1).execute()
        return {"ok": True, "rows": len(res.data or [])}
    except (APIError, httpx.HTTPError) as e:
        return {"ok": False, "error": str(e)}


def _check_dns(hostname: str) -> Dict[str, Any]:
    try:
        socket.getaddrinfo(hostname, 443)
        return {"dns_ok": True, "dns_error": None}
    except OSError as e:
        return {"dns_ok": False, "dns_error": str(e)}


def health_store_info(settings: Settings) -> Dict[str, Any]:
    if settings.data_store == "memory":
        return {"store": "memory", "connect_ok": True, "error": None, "tables": {}}

    hostname = urlparse(settings.supabase_url).hostname if settings.supabase_url else None
    info: Dict[str, Any] = {
        "store": settings.data_store,
        "supabase_url": settings.supabase_url,
        "hostname": hostname,
        "dns_ok": None,
        "dns_error": None,
        "connect_ok": False,
        "error": None,
        "tables": {},
    }
    if hostname:
        info.update(_check_dns(hostname))

    from backend.infra.supabase_client import get_service_supabase

    try:
        client = get_service_supabase(settings)
    except RuntimeError as e:
        info["error"] = str(e)
        return info
    for table in STORE_TABLES:
        info["tables"][table] = _check_table(client, table)
    info["connect_ok"] = all(t["ok"] for t in info["tables"].values())
    return info
