"""
Model settings API endpoints
"""
import logging
from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.api.deps import Services, get_services
from src.db.models import APIConfig, ConfigStatus, Provider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])

MASK = "********"


# Pydantic models
class APIConfigPayload(BaseModel):
    """Request/response model for model settings"""
    provider: Provider
    api_key: str = ""
    model_id: str = ""
    base_url: Optional[str] = None
    custom_proxies: Optional[List[str]] = None

    def to_config(self) -> APIConfig:
        proxies = [p.strip() for p in self.custom_proxies or [] if p.strip()]
        return APIConfig(
            provider=self.provider,
            api_key=self.api_key,
            model_id=self.model_id,
            base_url=self.base_url or None,
            custom_proxies=proxies or None
        )


def mask_api_key(api_key: str) -> str:
    """Keep the last four characters of a key visible"""
    if not api_key:
        return ""
    if len(api_key) <= 8:
        return MASK
    return f"{MASK}{api_key[-4:]}"


def _public_view(config: APIConfig) -> dict:
    data = config.to_dict()
    data['api_key'] = mask_api_key(config.api_key)
    return data


async def _restore_masked_key(config: APIConfig, services: Services) -> APIConfig:
    """Swap a masked key echoed back by a client for the stored one"""
    stored = await services.config_repo.get()
    if stored and config.api_key and config.api_key == mask_api_key(stored.api_key):
        config.api_key = stored.api_key
    return config


@router.get("")
async def get_settings(services: Services = Depends(get_services)):
    """
    Get stored settings with the API key masked (null when not configured)
    """
    config = await services.config_repo.get()
    return _public_view(config) if config else None


@router.put("")
async def update_settings(request: APIConfigPayload, services: Services = Depends(get_services)):
    """
    Replace stored settings

    Sending back the masked key from GET keeps the stored key.
    """
    config = await _restore_masked_key(request.to_config(), services)
    await services.config_repo.save(config)
    return _public_view(config)


@router.get("/status")
async def settings_status(services: Services = Depends(get_services)):
    """
    Whether a usable configuration is stored
    """
    config = await services.config_repo.get()
    if config and config.api_key:
        result = ConfigStatus(configured=True, provider=config.provider.value, model_id=config.model_id)
    else:
        result = ConfigStatus(configured=False)
    return asdict(result)


@router.post("/validate")
async def validate_settings(request: APIConfigPayload, services: Services = Depends(get_services)):
    """
    Check credentials and model reachability with a minimal completion
    """
    config = await _restore_masked_key(request.to_config(), services)
    result = await services.analyzer.validate_config(config)
    return asdict(result)
