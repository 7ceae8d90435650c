from fastapi import APIRouter

from app.api.schemas.appointment import ProviderInfo
from app.core.config import settings
from app.services.catalog import PAYMENT_METHODS, ServiceItem, get_services

router = APIRouter(tags=["catalog"])


@router.get("/providers", response_model=list[ProviderInfo])
async def list_providers() -> list[ProviderInfo]:
    return [ProviderInfo(**p.model_dump()) for p in settings.providers.values()]


@router.get("/catalog/services", response_model=list[ServiceItem])
async def list_services() -> list[ServiceItem]:
    return get_services()


@router.get("/catalog/payment-methods", response_model=list[str])
async def list_payment_methods() -> list[str]:
    return PAYMENT_METHODS
