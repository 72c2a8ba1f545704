"""
Real-time Feeds

Each socket holds one scoped gateway subscription for as long as the
client stays connected. Order feeds need the session token as the
``token`` query parameter.

    /ws/orders        the caller's order list, resent after every change
    /ws/orders/{id}   tracking for one order, resent on status change
    /ws/banners       carousel index and countdowns, every tick; the
                      client may send "next", "previous" or a slide index
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from foodzy.core.config import Settings, get_settings
from foodzy.services.auth import websocket_identity
from foodzy.services.banners import load_carousel
from foodzy.services.gateway import BaseDataGateway, get_gateway
from foodzy.services.orders import get_order, list_orders
from foodzy.services.tracking import build_tracking, order_detail_feed, order_list_feed

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])

WS_NOT_FOUND = 4404


async def watch_client(
    websocket: WebSocket,
    on_disconnect: Callable[[], Any],
    on_text: Optional[Callable[[str], Any]] = None,
) -> None:
    """Read client frames until the client goes away, then call ``on_disconnect``."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            on_disconnect()
            return
        if on_text and message.get("text") is not None:
            on_text(message["text"])


def _dump(models) -> list[dict]:
    return [model.model_dump(mode="json") for model in models]


@router.websocket("/ws/orders")
async def orders_feed(websocket: WebSocket, gateway: BaseDataGateway = Depends(get_gateway)):
    identity = await websocket_identity(websocket, gateway)
    if identity is None:
        return

    await websocket.accept()
    async with gateway.subscribe("orders", eq={"user_id": identity.id}) as changes:
        watcher = asyncio.create_task(watch_client(websocket, changes.close))
        try:
            await websocket.send_json(_dump(await list_orders(gateway, identity.id)))
            async for orders in order_list_feed(gateway, changes, identity.id):
                await websocket.send_json(_dump(orders))
        except WebSocketDisconnect:
            logger.debug(f"Order list feed closed for {identity.id}")
        finally:
            watcher.cancel()


@router.websocket("/ws/orders/{order_id}")
async def order_feed(
    websocket: WebSocket,
    order_id: str,
    gateway: BaseDataGateway = Depends(get_gateway),
):
    identity = await websocket_identity(websocket, gateway)
    if identity is None:
        return

    async with gateway.subscribe("orders", event="UPDATE", eq={"id": order_id}) as changes:
        order = await get_order(gateway, order_id, identity.id)
        if order is None:
            await websocket.close(code=WS_NOT_FOUND)
            return

        await websocket.accept()
        watcher = asyncio.create_task(watch_client(websocket, changes.close))
        try:
            await websocket.send_json(build_tracking(order).model_dump(mode="json"))
            async for tracking in order_detail_feed(changes, order):
                logger.debug(f"Order {order_id} now {tracking.order.status}")
                await websocket.send_json(tracking.model_dump(mode="json"))
        except WebSocketDisconnect:
            logger.debug(f"Order feed {order_id} closed")
        finally:
            watcher.cancel()


@router.websocket("/ws/banners")
async def banners_feed(
    websocket: WebSocket,
    gateway: BaseDataGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    await websocket.accept()
    carousel = await load_carousel(gateway, settings.banner_rotation_seconds)
    stop = asyncio.Event()

    def navigate(text: str) -> None:
        command = text.strip().lower()
        if command == "next":
            carousel.next()
        elif command == "previous":
            carousel.previous()
        elif command.isdigit():
            carousel.go_to(int(command))

    watcher = asyncio.create_task(watch_client(websocket, stop.set, navigate))
    try:
        while not stop.is_set():
            carousel.tick()
            await websocket.send_json({"index": carousel.index, "countdowns": carousel.countdowns()})
            try:
                await asyncio.wait_for(stop.wait(), timeout=settings.banner_tick_seconds)
            except asyncio.TimeoutError:
                pass
    except WebSocketDisconnect:
        logger.debug("Banner feed closed")
    finally:
        watcher.cancel()
