"""Customer order history and order detail."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from foodzy.schemas import ErrorResponse, OrderResponse, OrderTracking
from foodzy.services.auth import get_current_identity
from foodzy.services.gateway import AuthUser, BaseDataGateway, get_gateway
from foodzy.services.orders import get_order, list_orders
from foodzy.services.tracking import build_tracking

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.get("", response_model=List[OrderResponse])
async def my_orders(
    identity: AuthUser = Depends(get_current_identity),
    gateway: BaseDataGateway = Depends(get_gateway),
) -> List[OrderResponse]:
    return await list_orders(gateway, identity.id)


@router.get("/{order_id}", response_model=OrderTracking, responses={404: {"model": ErrorResponse}})
async def order_detail(
    order_id: str,
    identity: AuthUser = Depends(get_current_identity),
    gateway: BaseDataGateway = Depends(get_gateway),
) -> OrderTracking:
    """One of the caller's orders with its items and tracking progress."""
    order = await get_order(gateway, order_id, identity.id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return build_tracking(order)
