"""Customer menu."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from foodzy.schemas import CategoryResponse, FoodItemWithCategory
from foodzy.services.gateway import BaseDataGateway, get_gateway
from foodzy.services.menu import list_categories, list_menu_items

router = APIRouter(prefix="/api/menu", tags=["Menu"])


@router.get("/categories", response_model=List[CategoryResponse])
async def categories(gateway: BaseDataGateway = Depends(get_gateway)) -> List[CategoryResponse]:
    return await list_categories(gateway)


@router.get("/items", response_model=List[FoodItemWithCategory])
async def items(
    search: Optional[str] = Query(None),
    category_id: Optional[str] = Query(None, description="Category id or 'all'"),
    gateway: BaseDataGateway = Depends(get_gateway),
) -> List[FoodItemWithCategory]:
    return await list_menu_items(gateway, search, category_id)
