"""
Cart and Checkout

Every route works on the caller's cart store. Store failures surface as
502 with the store's alert text.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status

from foodzy.schemas import (
    CartItemAdd,
    CartQuantityUpdate,
    CartResponse,
    CheckoutRequest,
    ErrorResponse,
    OrderResponse,
)
from foodzy.routers.deps import get_cart_store
from foodzy.services.cart import CartStore
from foodzy.services.orders import EmptyCartError, checkout

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def cart_response(store: CartStore) -> CartResponse:
    return CartResponse(items=store.items, item_count=store.item_count, total=store.total)


def _ensure(ok: bool, store: CartStore) -> CartResponse:
    if not ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=store.alert)
    return cart_response(store)


@router.get("", response_model=CartResponse)
async def get_cart(store: CartStore = Depends(get_cart_store)) -> CartResponse:
    return cart_response(store)


@router.post("/items", response_model=CartResponse, responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}})
async def add_item(
    data: CartItemAdd,
    store: CartStore = Depends(get_cart_store),
) -> CartResponse:
    """Add a food item; an item already in the cart has its quantity raised."""
    unit_price = data.unit_price
    if unit_price is None:
        food = await store.gateway.select_one("food_items", eq={"id": data.food_item_id})
        if food is None:
            raise HTTPException(status_code=404, detail="Food item not found")
        unit_price = food["current_price"]

    return _ensure(await store.add_item(data.food_item_id, data.quantity, unit_price), store)


@router.patch("/items/{cart_item_id}", response_model=CartResponse, responses={404: {"model": ErrorResponse}})
async def update_item(
    cart_item_id: str,
    data: CartQuantityUpdate,
    store: CartStore = Depends(get_cart_store),
) -> CartResponse:
    if store.get(cart_item_id) is None:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return _ensure(await store.update_quantity(cart_item_id, data.quantity), store)


@router.delete("/items/{cart_item_id}", response_model=CartResponse, responses={404: {"model": ErrorResponse}})
async def remove_item(
    cart_item_id: str,
    store: CartStore = Depends(get_cart_store),
) -> CartResponse:
    if store.get(cart_item_id) is None:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return _ensure(await store.remove_item(cart_item_id), store)


@router.delete("", response_model=CartResponse)
async def clear_cart(store: CartStore = Depends(get_cart_store)) -> CartResponse:
    await store.clear()
    return cart_response(store)


@router.post(
    "/checkout",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def place_order(
    data: Optional[CheckoutRequest] = None,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    store: CartStore = Depends(get_cart_store),
) -> OrderResponse:
    """
    Turn the cart into an order.

    Send an ``Idempotency-Key`` header to make retries safe: a repeated
    key returns the order first placed with it.
    """
    try:
        return await checkout(
            store.gateway,
            store,
            data.delivery_address if data else None,
            idempotency_key,
        )
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))
