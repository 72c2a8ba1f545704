"""
Customer Menu

Active categories and available food items, with the menu page's search
box and category chips applied server-side.
"""

from typing import Optional

from foodzy.schemas import CategoryResponse, FoodItemWithCategory
from foodzy.services.crud import FILTER_ALL, matches_search
from foodzy.services.gateway import BaseDataGateway, Embed

CATEGORY_EMBED = Embed("category", "categories", "category_id")
MENU_SEARCH_FIELDS = ("name", "description")


async def list_categories(gateway: BaseDataGateway) -> list[CategoryResponse]:
    rows = await gateway.select("categories", eq={"is_active": True}, order_by="display_order")
    return [CategoryResponse.model_validate(row) for row in rows]


async def list_menu_items(
    gateway: BaseDataGateway,
    search: Optional[str] = None,
    category_id: Optional[str] = None,
) -> list[FoodItemWithCategory]:
    """Available items; ``category_id`` of ``all`` or None shows every category."""
    eq = {"is_available": True}
    if category_id and category_id != FILTER_ALL:
        eq["category_id"] = category_id

    rows = await gateway.select("food_items", eq=eq, order_by="name", embed=(CATEGORY_EMBED,))
    return [
        FoodItemWithCategory.model_validate(row)
        for row in rows
        if matches_search(row, MENU_SEARCH_FIELDS, search)
    ]
