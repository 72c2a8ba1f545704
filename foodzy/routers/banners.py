"""Home-page banner carousel."""

from fastapi import APIRouter, Depends

from foodzy.core.config import Settings, get_settings
from foodzy.schemas import CarouselResponse
from foodzy.services.banners import load_carousel
from foodzy.services.gateway import BaseDataGateway, get_gateway

router = APIRouter(prefix="/api/banners", tags=["Banners"])


@router.get("/carousel", response_model=CarouselResponse)
async def carousel(
    gateway: BaseDataGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
) -> CarouselResponse:
    """Active banners in display order, or the welcome placeholder."""
    carousel = await load_carousel(gateway, settings.banner_rotation_seconds)
    return carousel.snapshot()
