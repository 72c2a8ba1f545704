"""
SQLAlchemy Database Models

Table layout mirrors the hosted backend's public schema so the local
gateway and the Supabase gateway return the same row shapes:
- Catalog: categories, food items, banners
- Customer: cart items, orders, order items, status history
- Identity: user profiles, admin users
- Local-only auth directory: auth users and their sessions
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from foodzy.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, enum.Enum):
    """Order status workflow driven by admins."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


# =============================================================================
# CATALOG
# =============================================================================

class Category(Base):
    """Menu category; ``display_order`` drives the customer-facing sort."""
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=_now)

    def __repr__(self):
        return f"<Category {self.name} #{self.display_order}>"


class FoodItem(Base):
    """A dish on the menu. Read-only to customers."""
    __tablename__ = "food_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    category_id = Column(
        String(36),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name = Column(String(150), nullable=False, index=True)
    description = Column(Text, nullable=True)
    base_price = Column(Float, nullable=False, default=0.0)
    current_price = Column(Float, nullable=False, default=0.0)
    image_url = Column(String(500), nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)
    is_vegetarian = Column(Boolean, nullable=False, default=False)
    is_vegan = Column(Boolean, nullable=False, default=False)
    preparation_time = Column(Integer, nullable=False, default=15)  # minutes
    calories = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_now)

    def __repr__(self):
        return f"<FoodItem {self.name} - {self.current_price}>"


class Banner(Base):
    """Promotional banner; ``end_time`` doubles as a countdown deadline."""
    __tablename__ = "banners"

    id = Column(String(36), primary_key=True, default=_uuid)
    title = Column(String(200), nullable=False)
    image_url = Column(String(500), nullable=False)
    link_url = Column(String(500), nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=_now)

    def __repr__(self):
        return f"<Banner {self.title}>"


# =============================================================================
# CUSTOMER
# =============================================================================

class CartItem(Base):
    """
    One cart line. ``price_at_add`` is captured when the line is created
    and never follows later catalog price changes.
    """
    __tablename__ = "cart_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    food_item_id = Column(
        String(36),
        ForeignKey("food_items.id", ondelete="CASCADE"),
        nullable=False,
    )
    quantity = Column(Integer, nullable=False, default=1)
    price_at_add = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now)

    def __repr__(self):
        return f"<CartItem {self.food_item_id} x{self.quantity}>"


class Order(Base):
    """Customer order, created at checkout with status ``pending``."""
    __tablename__ = "orders"
    __table_args__ = (UniqueConstraint("user_id", "idempotency_key"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    order_number = Column(String(32), nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    status = Column(String(32), nullable=False, default=OrderStatus.PENDING.value, index=True)
    total_amount = Column(Float, nullable=False)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    delivery_address_snapshot = Column(JSON, nullable=True)
    idempotency_key = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)

    def __repr__(self):
        return f"<Order {self.order_number} - {self.status}>"


class OrderItem(Base):
    """Order line with a name snapshot so old orders stay readable."""
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    order_id = Column(
        String(36),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    food_item_id = Column(String(36), nullable=True)
    quantity = Column(Integer, nullable=False)
    price_at_order = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    food_item_snapshot = Column(JSON, nullable=True)


class OrderStatusHistory(Base):
    """Append-only log of status transitions."""
    __tablename__ = "order_status_history"

    id = Column(String(36), primary_key=True, default=_uuid)
    order_id = Column(
        String(36),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(String(32), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)


# =============================================================================
# IDENTITY
# =============================================================================

class UserProfile(Base):
    """Display attributes keyed by the auth identity."""
    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True)
    full_name = Column(String(150), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=True)
    preferred_language = Column(String(5), nullable=False, default="en")
    created_at = Column(DateTime(timezone=True), default=_now)


class AdminUser(Base):
    """Presence of a row is the admin authorization check."""
    __tablename__ = "admin_users"

    id = Column(String(36), primary_key=True)
    role = Column(String(30), nullable=False, default="admin")
    created_at = Column(DateTime(timezone=True), default=_now)


class AuthUser(Base):
    """Local stand-in for the hosted auth directory."""
    __tablename__ = "auth_users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(100), nullable=False)
    full_name = Column(String(150), nullable=True)
    phone = Column(String(30), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)
    last_sign_in_at = Column(DateTime(timezone=True), nullable=True)


class AuthSession(Base):
    """Opaque bearer token issued by the local auth directory."""
    __tablename__ = "auth_sessions"

    token = Column(String(64), primary_key=True)
    user_id = Column(
        String(36),
        ForeignKey("auth_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), default=_now)
