"""
Demo Data Seeder

Inserts the demo categories and food items. Rows whose name already
exists are skipped, so the script can be run repeatedly.
Run from project root: python scripts/seed.py
"""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from foodzy.core.config import setup_logging
from foodzy.services.gateway import BaseDataGateway, GatewayError, create_gateway

CATEGORIES = [
    {"name": "Burgers", "image_url": "https://images.unsplash.com/photo-1568901346375-23c9450c58cd?w=800", "is_active": True, "display_order": 1},
    {"name": "Pizza", "image_url": "https://images.unsplash.com/photo-1513104890138-7c749659a591?w=800", "is_active": True, "display_order": 2},
    {"name": "Sushi", "image_url": "https://images.unsplash.com/photo-1579871494447-9811cf80d66c?w=800", "is_active": True, "display_order": 3},
    {"name": "Desserts", "image_url": "https://images.unsplash.com/photo-1563729784474-d77dbb933a9e?w=800", "is_active": True, "display_order": 4},
]

FOOD_ITEMS = [
    {
        "name": "Classic Cheeseburger",
        "description": "Juicy beef patty with cheddar cheese, lettuce, tomato, and our secret sauce.",
        "current_price": 12.99,
        "base_price": 12.99,
        "image_url": "https://images.unsplash.com/photo-1568901346375-23c9450c58cd?w=800",
        "category": "Burgers",
        "is_available": True,
        "is_vegetarian": False,
        "is_vegan": False,
    },
    {
        "name": "Margherita Pizza",
        "description": "Fresh basil, mozzarella cheese, and tomato sauce on a crispy crust.",
        "current_price": 14.99,
        "base_price": 14.99,
        "image_url": "https://images.unsplash.com/photo-1574071318508-1cdbab80d002?w=800",
        "category": "Pizza",
        "is_available": True,
        "is_vegetarian": True,
        "is_vegan": False,
    },
]


async def seed_categories(gateway: BaseDataGateway) -> dict[str, str]:
    """Insert missing categories; returns name -> id for all of them."""
    ids = {}
    for category in CATEGORIES:
        existing = await gateway.select_one("categories", eq={"name": category["name"]})
        if existing:
            print(f"   ⏭️  Skipped {category['name']} (already exists)")
            ids[category["name"]] = existing["id"]
            continue
        rows = await gateway.insert("categories", category)
        ids[category["name"]] = rows[0]["id"]
        print(f"   ✅ Inserted {category['name']}")
    return ids


async def seed_food_items(gateway: BaseDataGateway, category_ids: dict[str, str]) -> None:
    for item in FOOD_ITEMS:
        if await gateway.select_one("food_items", eq={"name": item["name"]}):
            print(f"   ⏭️  Skipped {item['name']} (already exists)")
            continue

        row = {k: v for k, v in item.items() if k != "category"}
        row["category_id"] = category_ids.get(item["category"])
        try:
            await gateway.insert("food_items", row)
        except GatewayError as e:
            print(f"   ❌ Error inserting {item['name']}: {e}")
            continue
        print(f"   ✅ Inserted {item['name']}")


async def main() -> None:
    setup_logging()
    gateway = create_gateway()
    await gateway.initialize()

    print("=" * 60)
    print("🌱 Seeding database...")
    print("=" * 60)
    try:
        print("\n📂 Categories:")
        category_ids = await seed_categories(gateway)
        print("\n🍔 Food items:")
        await seed_food_items(gateway, category_ids)
    finally:
        await gateway.close()

    print("\n✅ Seeding complete!")


if __name__ == "__main__":
    asyncio.run(main())
