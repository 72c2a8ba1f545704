"""
API Routers

One router per area of the application; ``foodzy.main`` mounts them all.
"""

from foodzy.routers import admin, auth, banners, cart, chat, i18n, menu, orders, ws

__all__ = ["admin", "auth", "banners", "cart", "chat", "i18n", "menu", "orders", "ws"]
