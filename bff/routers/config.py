"""Config Router - storefront settings served from WordPress."""
from fastapi import APIRouter, Depends

from bff.config import APP_CONFIG_NAMESPACE, DEFAULT_APP_CONFIG
from bff.logging import get_logger
from bff.upstream import CommerceClient, UpstreamError

from .deps import commerce_client

logger = get_logger(__name__)

router = APIRouter(prefix="/config", tags=["config"])


@router.get("")
async def get_app_config(client: CommerceClient = Depends(commerce_client)):
    """App config from the muo/v1 endpoint, or defaults when it is missing."""
    try:
        return await client.get("/config", namespace=APP_CONFIG_NAMESPACE, use_cache=False)
    except UpstreamError as e:
        logger.warning("App config endpoint unavailable (%s), serving defaults", e.code)
        return dict(DEFAULT_APP_CONFIG)
