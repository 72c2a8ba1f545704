"""
Admin Back-office

Every route here resolves ``require_admin`` once. Categories, food items
and banners share the generic CRUD resource; orders, users, bulk email,
the dashboard and image uploads have their own routes.
"""

import logging
import secrets
import time
from pathlib import PurePath
from typing import Any, List, Optional, Type

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from pydantic import BaseModel

from foodzy.core.config import Settings, get_settings
from foodzy.models import OrderStatus
from foodzy.schemas import (
    BannerCreate,
    BannerResponse,
    BannerUpdate,
    BulkEmailRequest,
    BulkEmailResponse,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    DashboardStats,
    DirectoryUser,
    ErrorResponse,
    FoodItemCreate,
    FoodItemUpdate,
    FoodItemWithCategory,
    OrderResponse,
    OrderStatusUpdate,
    OrderWithItems,
    UploadResponse,
    UserProfileResponse,
)
from foodzy.services.auth import require_admin
from foodzy.services.crud import ConfirmationRequired, CrudResource, prepare_banner, prepare_food_item
from foodzy.services.email import BaseEmailService, get_email_service
from foodzy.services.gateway import BaseDataGateway, get_gateway
from foodzy.services.marketing import BulkEmailError, send_bulk_email
from foodzy.services.menu import CATEGORY_EMBED
from foodzy.services.orders import ORDER_ITEMS_EMBED, PROFILE_EMBED, set_order_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"], dependencies=[Depends(require_admin)])

MAX_UPLOAD_BYTES = 5 * 1024 * 1024


# =============================================================================
# RESOURCES
# =============================================================================

CATEGORIES = CrudResource(
    table="categories",
    entity_name="Category",
    output_schema=CategoryResponse,
    search_fields=("name", "description"),
    order_by="display_order",
)

FOOD_ITEMS = CrudResource(
    table="food_items",
    entity_name="Food item",
    output_schema=FoodItemWithCategory,
    search_fields=("name", "description"),
    filter_field="category_id",
    order_by="created_at",
    descending=True,
    embed=(CATEGORY_EMBED,),
    prepare=prepare_food_item,
)

BANNERS = CrudResource(
    table="banners",
    entity_name="Banner",
    output_schema=BannerResponse,
    search_fields=("title",),
    order_by="display_order",
    prepare=prepare_banner,
)

ORDERS = CrudResource(
    table="orders",
    entity_name="Order",
    output_schema=OrderWithItems,
    search_fields=("order_number", "profile.full_name"),
    filter_field="status",
    order_by="created_at",
    descending=True,
    embed=(PROFILE_EMBED, ORDER_ITEMS_EMBED),
)

PROFILES = CrudResource(
    table="user_profiles",
    entity_name="User profile",
    output_schema=UserProfileResponse,
    search_fields=("full_name", "email", "phone"),
    order_by="created_at",
    descending=True,
)


def register_crud_routes(
    path: str,
    resource: CrudResource,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    filter_param: Optional[str] = None,
) -> None:
    """Add list/create/update/delete routes for ``resource`` under ``path``."""
    output = resource.output_schema
    not_found = f"{resource.entity_name} not found"

    async def list_rows(
        search: Optional[str] = Query(None),
        filter_value: Optional[str] = Query(None, alias=filter_param or "filter"),
        gateway: BaseDataGateway = Depends(get_gateway),
    ) -> List[Any]:
        return await resource.list(gateway, search, filter_value)

    async def create_row(
        data: create_schema,
        gateway: BaseDataGateway = Depends(get_gateway),
    ) -> Any:
        return await resource.create(gateway, data)

    async def update_row(
        entity_id: str,
        data: update_schema,
        gateway: BaseDataGateway = Depends(get_gateway),
    ) -> Any:
        row = await resource.update(gateway, entity_id, data)
        if row is None:
            raise HTTPException(status_code=404, detail=not_found)
        return row

    async def delete_row(
        entity_id: str,
        confirm: bool = Query(False, description="Must be true to delete"),
        gateway: BaseDataGateway = Depends(get_gateway),
    ) -> dict[str, Any]:
        try:
            deleted = await resource.delete(gateway, entity_id, confirm)
        except ConfirmationRequired as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
        if not deleted:
            raise HTTPException(status_code=404, detail=not_found)
        return {"success": True, "id": entity_id}

    errors = {404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}
    router.add_api_route(path, list_rows, methods=["GET"], response_model=List[output])
    router.add_api_route(
        path, create_row, methods=["POST"], response_model=output,
        status_code=status.HTTP_201_CREATED,
    )
    router.add_api_route(
        f"{path}/{{entity_id}}", update_row, methods=["PATCH"],
        response_model=output, responses=errors,
    )
    router.add_api_route(f"{path}/{{entity_id}}", delete_row, methods=["DELETE"], responses=errors)


register_crud_routes("/categories", CATEGORIES, CategoryCreate, CategoryUpdate)
register_crud_routes("/food-items", FOOD_ITEMS, FoodItemCreate, FoodItemUpdate, "category_id")
register_crud_routes("/banners", BANNERS, BannerCreate, BannerUpdate)


# =============================================================================
# ORDERS
# =============================================================================

@router.get("/orders", response_model=List[OrderWithItems])
async def list_orders(
    search: Optional[str] = Query(None, description="Order number or customer name"),
    status_filter: Optional[str] = Query(None, alias="status", description="Status or 'all'"),
    gateway: BaseDataGateway = Depends(get_gateway),
) -> List[OrderWithItems]:
    return await ORDERS.list(gateway, search, status_filter)


@router.patch(
    "/orders/{order_id}/status",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    gateway: BaseDataGateway = Depends(get_gateway),
) -> OrderResponse:
    """Set an order's status and append it to the status history."""
    order = await set_order_status(gateway, order_id, data.status.value)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


# =============================================================================
# USERS
# =============================================================================

@router.get("/profiles", response_model=List[UserProfileResponse])
async def list_profiles(
    search: Optional[str] = Query(None),
    gateway: BaseDataGateway = Depends(get_gateway),
) -> List[UserProfileResponse]:
    return await PROFILES.list(gateway, search)


@router.get("/users", response_model=List[DirectoryUser])
async def list_users(gateway: BaseDataGateway = Depends(get_gateway)) -> List[DirectoryUser]:
    """The full authentication directory."""
    users = await gateway.list_auth_users()
    logger.info(f"Found {len(users)} users")
    return [
        DirectoryUser(
            id=user.id,
            email=user.email,
            full_name=user.full_name or "N/A",
            phone=user.phone or "N/A",
            created_at=user.created_at,
            last_sign_in_at=user.last_sign_in_at,
        )
        for user in users
    ]


# =============================================================================
# MARKETING
# =============================================================================

@router.post(
    "/send-email",
    response_model=BulkEmailResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def send_email(
    data: BulkEmailRequest,
    gateway: BaseDataGateway = Depends(get_gateway),
    email_service: BaseEmailService = Depends(get_email_service),
) -> BulkEmailResponse:
    try:
        return await send_bulk_email(gateway, email_service, data)
    except BulkEmailError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# =============================================================================
# DASHBOARD & UPLOADS
# =============================================================================

@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(gateway: BaseDataGateway = Depends(get_gateway)) -> DashboardStats:
    delivered = await gateway.select("orders", eq={"status": OrderStatus.DELIVERED.value})
    return DashboardStats(
        total_orders=await gateway.count("orders"),
        total_users=await gateway.count("user_profiles"),
        total_items=await gateway.count("food_items"),
        revenue=round(sum(row.get("total_amount") or 0 for row in delivered), 2),
    )


@router.post("/uploads", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile = File(...),
    gateway: BaseDataGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
) -> UploadResponse:
    """Store an image in the public bucket and return its URL."""
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Please upload an image file")

    data = await file.read()
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="Image size must be less than 5MB")

    extension = PurePath(file.filename or "").suffix.lstrip(".") or "bin"
    path = f"{secrets.token_hex(6)}_{int(time.time() * 1000)}.{extension}"

    url = await gateway.upload(settings.supabase_storage_bucket, path, data, content_type)
    logger.info(f"Image uploaded: {path} ({len(data)} bytes)")
    return UploadResponse(url=url, path=path)
