from fastapi import APIRouter, Depends

from spotix_api.api.health import health_payload
from spotix_api.core.config import Settings, get_settings

router = APIRouter()

@router.get("")
@router.get("/")
def health(settings: Settings = Depends(get_settings)):
    payload = health_payload(settings.app_name)
    payload["env"] = settings.env
    return payload
