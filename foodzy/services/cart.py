"""
Cart Store

Per-user cart persisted in ``cart_items`` and mirrored in memory.

Merging: adding a food item already in the cart raises the existing
line's quantity instead of inserting a second line. Quantities of zero or
less remove the line. Prices are locked at add time (``price_at_add``).

Persistence failures never raise out of the store: they are logged, the
mirror keeps its last good contents and ``alert`` holds a message for
the user.
"""

import logging
from typing import Optional

from foodzy.schemas import CartLine
from foodzy.services.gateway import BaseDataGateway, Embed, GatewayError

logger = logging.getLogger(__name__)

CART_EMBED = (Embed("food_item", "food_items", "food_item_id"),)

LOGIN_REQUIRED = "Please login to add items to cart"
ADD_FAILED = "Failed to add item to cart"
REMOVE_FAILED = "Failed to remove item from cart"
UPDATE_FAILED = "Failed to update quantity"


class CartStore:
    """
    In-memory mirror of one user's cart.

    Example:
        >>> store = await CartStore.load(gateway, user.id)
        >>> await store.add_item(burger_id, 2, 12.99)
        >>> store.item_count, store.total
        (2, 25.98)
    """

    def __init__(self, gateway: BaseDataGateway):
        self.gateway = gateway
        self.user_id: Optional[str] = None
        self.items: list[CartLine] = []
        self.alert: Optional[str] = None

    @classmethod
    async def load(cls, gateway: BaseDataGateway, user_id: Optional[str]) -> "CartStore":
        store = cls(gateway)
        await store.bind(user_id)
        return store

    # =========================================================================
    # DERIVED VALUES
    # =========================================================================

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    @property
    def total(self) -> float:
        return sum(line.price_at_add * line.quantity for line in self.items)

    def get(self, cart_item_id: str) -> Optional[CartLine]:
        return next((line for line in self.items if line.id == cart_item_id), None)

    def find(self, food_item_id: str) -> Optional[CartLine]:
        return next((line for line in self.items if line.food_item_id == food_item_id), None)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def bind(self, user_id: Optional[str]) -> None:
        """Switch identity; the mirror is discarded and refetched."""
        self.user_id = user_id
        self.items = []
        self.alert = None
        await self.refresh()

    async def refresh(self) -> None:
        if not self.user_id:
            self.items = []
            return

        try:
            rows = await self.gateway.select(
                "cart_items",
                eq={"user_id": self.user_id},
                order_by="created_at",
                embed=CART_EMBED,
            )
        except GatewayError as e:
            logger.error(f"Error fetching cart: {e}")
            return

        self.items = [CartLine.model_validate(row) for row in rows]

    def _fail(self, message: str, error: Exception) -> bool:
        logger.error(f"{message}: {error}")
        self.alert = message
        return False

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def add_item(self, food_item_id: str, quantity: int, unit_price: float) -> bool:
        """Add ``quantity`` of a food item, merging into an existing line."""
        self.alert = None
        if not self.user_id:
            self.alert = LOGIN_REQUIRED
            return False

        existing = self.find(food_item_id)
        if existing is not None:
            return await self.update_quantity(existing.id, existing.quantity + quantity)

        try:
            await self.gateway.insert("cart_items", {
                "user_id": self.user_id,
                "food_item_id": food_item_id,
                "quantity": quantity,
                "price_at_add": unit_price,
            })
        except GatewayError as e:
            return self._fail(ADD_FAILED, e)

        logger.info(f"Cart {self.user_id}: added {food_item_id} x{quantity}")
        await self.refresh()
        return True

    async def remove_item(self, cart_item_id: str) -> bool:
        self.alert = None
        try:
            await self.gateway.delete(
                "cart_items", eq={"id": cart_item_id, "user_id": self.user_id}
            )
        except GatewayError as e:
            return self._fail(REMOVE_FAILED, e)

        await self.refresh()
        return True

    async def update_quantity(self, cart_item_id: str, quantity: int) -> bool:
        """Overwrite a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            return await self.remove_item(cart_item_id)

        self.alert = None
        try:
            await self.gateway.update(
                "cart_items",
                {"quantity": quantity},
                eq={"id": cart_item_id, "user_id": self.user_id},
            )
        except GatewayError as e:
            return self._fail(UPDATE_FAILED, e)

        await self.refresh()
        return True

    async def clear(self) -> bool:
        """Delete every line of the user's cart."""
        if not self.user_id:
            return False

        try:
            await self.gateway.delete("cart_items", eq={"user_id": self.user_id})
        except GatewayError as e:
            logger.error(f"Error clearing cart: {e}")
            return False

        self.items = []
        return True
