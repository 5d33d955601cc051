from fastapi import APIRouter, Depends

from backend.config import Settings
from backend.health.service import health_store_info
from backend.infra.deps import get_settings

router = APIRouter(prefix="/api/health", tags=["Health"])


@router.get("")
def health_root():
    return {"status": "ok", "message": "Le backend est opérationnel"}


@router.get("/store")
def health_store(settings: Settings = Depends(get_settings)):
    return health_store_info(settings)
