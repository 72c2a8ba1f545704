"""
Pydantic Schemas for Request/Response Validation

Request bodies are checked for shape and native constraints only
(required, numeric, email format). Joined reads coming back from the
gateway are parsed into explicit composed types:
- FoodItemWithCategory: food item + its category
- CartLine: cart row + the food item it points at
- OrderWithItems: order + customer profile + order items
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

EMAIL_PATTERN = re.compile(r"^[\w\.+-]+@[\w\.-]+\.\w+$")


# =============================================================================
# ENUMS
# =============================================================================

class OrderStatusEnum(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class LanguageCode(str, Enum):
    EN = "en"
    AR = "ar"
    HI = "hi"
    ES = "es"
    FR = "fr"


# =============================================================================
# AUTH SCHEMAS
# =============================================================================

class RegisterRequest(BaseModel):
    """Customer sign-up form."""
    email: str = Field(..., max_length=255, examples=["jane@example.com"])
    password: str = Field(..., examples=["secret123"])
    confirm_password: Optional[str] = None
    full_name: Optional[str] = Field(None, max_length=150, examples=["Jane Doe"])
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


class IdentityResponse(BaseModel):
    """The signed-in user."""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    is_admin: bool = False


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: IdentityResponse


# =============================================================================
# CATALOG SCHEMAS
# =============================================================================

class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Burgers"])
    description: Optional[str] = None
    image_url: Optional[str] = None
    display_order: int = 0
    is_active: bool = True


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryResponse(CategoryBase):
    id: str
    created_at: Optional[datetime] = None


class CategoryRef(BaseModel):
    id: str
    name: str


class FoodItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=150, examples=["Classic Cheeseburger"])
    description: Optional[str] = None
    category_id: Optional[str] = None
    base_price: float = Field(0.0, examples=[12.99])
    current_price: Optional[float] = Field(None, examples=[12.99])
    image_url: Optional[str] = None
    is_available: bool = True
    is_vegetarian: bool = False
    is_vegan: bool = False
    preparation_time: int = 15
    calories: int = 0


class FoodItemCreate(FoodItemBase):
    pass


class FoodItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    category_id: Optional[str] = None
    base_price: Optional[float] = None
    current_price: Optional[float] = None
    image_url: Optional[str] = None
    is_available: Optional[bool] = None
    is_vegetarian: Optional[bool] = None
    is_vegan: Optional[bool] = None
    preparation_time: Optional[int] = None
    calories: Optional[int] = None


class FoodItemResponse(FoodItemBase):
    id: str
    current_price: float = 0.0
    created_at: Optional[datetime] = None


class FoodItemWithCategory(FoodItemResponse):
    """Food item joined with its category."""
    category: Optional[CategoryRef] = None


class BannerBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, examples=["Weekend Special"])
    image_url: str
    link_url: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    display_order: int = 0
    is_active: bool = True

    @field_validator("start_time", "end_time", "link_url", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        # Blank form fields arrive as empty strings
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BannerCreate(BannerBase):
    pass


class BannerUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("start_time", "end_time", "link_url", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BannerResponse(BannerBase):
    id: str
    created_at: Optional[datetime] = None


class CarouselSlide(BaseModel):
    id: Optional[str] = None
    title: str
    image_url: str
    link_url: Optional[str] = None
    end_time: Optional[datetime] = None
    time_left: Optional[str] = None


class CarouselResponse(BaseModel):
    index: int
    rotation_seconds: float
    slides: List[CarouselSlide]


# =============================================================================
# CART SCHEMAS
# =============================================================================

class CartItemAdd(BaseModel):
    """Add a food item; ``unit_price`` defaults to the item's current price."""
    food_item_id: str
    quantity: int = Field(default=1, ge=1, examples=[2])
    unit_price: Optional[float] = Field(None, ge=0, examples=[12.99])


class CartQuantityUpdate(BaseModel):
    """Zero or a negative quantity removes the line."""
    quantity: int


class CartFoodItem(BaseModel):
    name: str
    image_url: Optional[str] = None
    current_price: float = 0.0
    is_available: bool = True


class CartLine(BaseModel):
    """Cart row joined with its food item."""
    id: str
    user_id: str
    food_item_id: str
    quantity: int
    price_at_add: float
    food_item: Optional[CartFoodItem] = None

    @property
    def line_total(self) -> float:
        return self.quantity * self.price_at_add


class CartResponse(BaseModel):
    items: List[CartLine]
    item_count: int
    total: float


class CheckoutRequest(BaseModel):
    delivery_address: Optional[dict[str, Any]] = Field(
        None,
        examples=[{"street": "12 Market Street", "city": "Mumbai"}],
    )


# =============================================================================
# ORDER SCHEMAS
# =============================================================================

class ProfileSummary(BaseModel):
    id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class OrderedFoodItem(BaseModel):
    name: str
    image_url: Optional[str] = None


class OrderItemView(BaseModel):
    """Order line with the live food item, when it still exists."""
    id: str
    order_id: str
    food_item_id: Optional[str] = None
    quantity: int
    price_at_order: float
    total_price: float
    food_item_snapshot: Optional[dict[str, Any]] = None
    food_item: Optional[OrderedFoodItem] = None

    @property
    def name(self) -> str:
        if self.food_item_snapshot and self.food_item_snapshot.get("name"):
            return self.food_item_snapshot["name"]
        if self.food_item:
            return self.food_item.name
        return "Unknown item"


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    status: str
    total_amount: float
    payment_status: str
    delivery_address_snapshot: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderWithItems(OrderResponse):
    """Order joined with its customer profile and its items."""
    profile: Optional[ProfileSummary] = None
    order_items: List[OrderItemView] = Field(default_factory=list)


class TrackingStep(BaseModel):
    key: str
    label: str
    completed: bool
    active: bool


class OrderTracking(BaseModel):
    order: OrderWithItems
    progress_index: int
    progress_percent: float
    steps: List[TrackingStep]


class OrderStatusUpdate(BaseModel):
    status: OrderStatusEnum


# =============================================================================
# USER SCHEMAS
# =============================================================================

class UserProfileResponse(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    preferred_language: Optional[str] = "en"
    created_at: Optional[datetime] = None


class DirectoryUser(BaseModel):
    """Authentication-directory entry as shown on the admin users page."""
    id: str
    email: Optional[str] = None
    full_name: str = "N/A"
    phone: str = "N/A"
    created_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None


class DashboardStats(BaseModel):
    total_orders: int
    total_users: int
    total_items: int
    revenue: float


class UploadResponse(BaseModel):
    url: str
    path: str


# =============================================================================
# MARKETING SCHEMAS
# =============================================================================

class BulkEmailRequest(BaseModel):
    """Subject and message are checked by the handler so blanks answer 400."""
    subject: Optional[str] = None
    message: Optional[str] = None
    target_audience: str = Field(
        default="all",
        validation_alias=AliasChoices("target_audience", "targetAudience"),
    )


class BulkEmailResponse(BaseModel):
    success: bool = True
    message: str
    sent: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)


# =============================================================================
# ASSISTANT SCHEMAS
# =============================================================================

class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(..., examples=["I want a burger"])
    history: List[ChatMessage] = Field(default_factory=list)


class ChatResponse(BaseModel):
    reply: str
    order_intent: bool = False
    added_food_item_id: Optional[str] = None
    alert: Optional[str] = None


class VoiceTranscript(BaseModel):
    """One speech-recognition result posted by the browser."""
    transcript: str
    confidence: float = Field(default=0.0, ge=0, le=1)
    is_final: bool = Field(default=False, validation_alias=AliasChoices("is_final", "isFinal"))
    history: List[ChatMessage] = Field(default_factory=list)


class VoiceResponse(BaseModel):
    transcript: str
    is_final: bool
    chat: Optional[ChatResponse] = None


# =============================================================================
# LANGUAGE SCHEMAS
# =============================================================================

class LanguageInfo(BaseModel):
    code: str
    native_name: str
    rtl: bool = False


class TranslationTable(BaseModel):
    language: str
    direction: Literal["ltr", "rtl"]
    strings: dict[str, str]


class TranslateRequest(BaseModel):
    text: str
    target: LanguageCode
    source: LanguageCode = LanguageCode.EN


class TranslateBatchRequest(BaseModel):
    texts: List[str]
    target: LanguageCode
    source: LanguageCode = LanguageCode.EN


class TranslateResponse(BaseModel):
    text: str
    source: str
    target: str


class TranslateBatchResponse(BaseModel):
    texts: List[str]
    source: str
    target: str


class DetectRequest(BaseModel):
    text: str


class DetectResponse(BaseModel):
    language: str


# =============================================================================
# SYSTEM SCHEMAS
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    gateway: str
    email_service: str
    chat_model: str
    translation_service: str
    timestamp: datetime
