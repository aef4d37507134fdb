from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from checkout_router.config import APP_VERSION, SERVICE_NAME
from checkout_router.checkout.dependencies import get_catalog
from checkout_router.catalog import Catalog
from checkout_router.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])


class HealthInfo(BaseModel):
    status: str
    service: str
    version: str
    timestamp: str
    services_configured: int
    accepts_display_text: bool
    fuzzy_matching: bool


@router.get("", response_model=HealthInfo)
def health_root(catalog: Catalog = Depends(get_catalog)):
    return HealthInfo(
        status="ok",
        service=SERVICE_NAME,
        version=APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        services_configured=len(catalog),
        accepts_display_text=True,
        fuzzy_matching=True,
    )


@router.get("/rate-limit")
def health_rate_limit(request: Request):
    return JSONResponse(rate_limit_health_info(request))
