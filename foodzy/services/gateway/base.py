"""
Data Gateway Abstract Base Class

Defines the interface contract for the hosted-backend boundary. Every
route and service talks to persistence, auth, real-time change events and
file storage only through this interface.

Implementations:
    - LocalDataGateway: SQLAlchemy async engine (development, tests)
    - SupabaseDataGateway: Supabase client (staging, production)

Rows travel as plain dicts keyed by column name, the same shape the
hosted backend returns from its REST interface.
"""

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncIterator, Iterable, Optional, Union

Row = dict[str, Any]


class GatewayError(Exception):
    """Raised when the backend rejects or fails an operation."""

    def __init__(self, message: str, operation: str = "", table: str = ""):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.table = table

    def __str__(self) -> str:
        where = f"{self.operation} {self.table}".strip()
        return f"{where}: {self.message}" if where else self.message


@dataclass(frozen=True)
class Embed:
    """
    A joined read: attach rows of ``table`` under ``alias``.

    ``local_column`` on the parent row is matched against ``remote_column``
    on the embedded table. ``many`` embeds a list, otherwise a single row
    (or None). ``embed`` nests further joins under each embedded row.

    Example:
        Embed("food_item", "food_items", "food_item_id")
        Embed("order_items", "order_items", "id", "order_id", many=True)
    """
    alias: str
    table: str
    local_column: str
    remote_column: str = "id"
    many: bool = False
    embed: tuple["Embed", ...] = ()


@dataclass
class ChangeEvent:
    """A row change pushed by the backend."""
    table: str
    event: str  # INSERT | UPDATE | DELETE
    new: Row = field(default_factory=dict)
    old: Row = field(default_factory=dict)


@dataclass
class AuthUser:
    """An entry of the authentication directory."""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None


@dataclass
class AuthSession:
    """A session issued at sign-in."""
    access_token: str
    user: AuthUser


class Subscription:
    """
    Change-event stream for one table, optionally narrowed by column
    equality. Iterate it with ``async for`` inside ``gateway.subscribe``.
    """

    def __init__(self, table: str, event: str = "*", eq: Optional[Row] = None):
        self.table = table
        self.event = event.upper()
        self.eq = dict(eq or {})
        self.closed = False
        self._queue: asyncio.Queue[Optional[ChangeEvent]] = asyncio.Queue()

    def matches(self, change: ChangeEvent) -> bool:
        if change.table != self.table:
            return False
        if self.event != "*" and change.event != self.event:
            return False
        row = change.new or change.old
        return all(str(row.get(k)) == str(v) for k, v in self.eq.items())

    def push(self, change: ChangeEvent) -> None:
        if not self.closed and self.matches(change):
            self._queue.put_nowait(change)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(None)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> ChangeEvent:
        if self.closed and self._queue.empty():
            raise StopAsyncIteration
        change = await self._queue.get()
        if change is None:
            raise StopAsyncIteration
        return change


class BaseDataGateway(ABC):
    """
    Abstract base class for the data gateway.

    Example:
        >>> gateway = get_gateway()
        >>> rows = await gateway.select(
        ...     "orders",
        ...     eq={"user_id": user_id},
        ...     order_by="created_at",
        ...     descending=True,
        ... )
        >>> async with gateway.subscribe("orders", eq={"id": order_id}) as changes:
        ...     async for change in changes:
        ...         print(change.new["status"])
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., "local", "supabase")."""
        pass

    async def initialize(self) -> None:
        """Prepare connections or schema. Called once at startup."""

    async def close(self) -> None:
        """Release connections. Called once at shutdown."""

    # =========================================================================
    # ROWS
    # =========================================================================

    @abstractmethod
    async def select(
        self,
        table: str,
        eq: Optional[Row] = None,
        ilike: Optional[dict[str, str]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        embed: Iterable[Embed] = (),
    ) -> list[Row]:
        """
        Read rows.

        Args:
            table: Collection name
            eq: Column equality filters
            ilike: Case-insensitive pattern filters (``%`` wildcards)
            order_by: Column to sort on
            descending: Sort direction
            limit: Maximum rows returned
            embed: Joined reads attached to each row
        """
        pass

    async def select_one(
        self,
        table: str,
        eq: Optional[Row] = None,
        embed: Iterable[Embed] = (),
    ) -> Optional[Row]:
        """Read the first row matching ``eq``, or None."""
        rows = await self.select(table, eq=eq, limit=1, embed=embed)
        return rows[0] if rows else None

    @abstractmethod
    async def insert(self, table: str, rows: Union[Row, list[Row]]) -> list[Row]:
        """Insert one or many rows and return them with defaults filled in."""
        pass

    @abstractmethod
    async def update(self, table: str, values: Row, eq: Row) -> list[Row]:
        """Update rows matching ``eq`` and return them."""
        pass

    @abstractmethod
    async def delete(self, table: str, eq: Row) -> int:
        """Delete rows matching ``eq`` and return how many went away."""
        pass

    @abstractmethod
    async def count(self, table: str, eq: Optional[Row] = None) -> int:
        """Count rows matching ``eq``."""
        pass

    # =========================================================================
    # REAL-TIME
    # =========================================================================

    @asynccontextmanager
    async def subscribe(
        self,
        table: str,
        event: str = "*",
        eq: Optional[Row] = None,
    ) -> AsyncIterator[Subscription]:
        """
        Subscribe to change events on ``table``.

        The subscription is released when the ``async with`` block exits,
        whether normally or through an exception.
        """
        subscription = Subscription(table, event, eq)
        handle = await self._open_subscription(subscription)
        try:
            yield subscription
        finally:
            subscription.close()
            await self._close_subscription(subscription, handle)

    @abstractmethod
    async def _open_subscription(self, subscription: Subscription) -> Any:
        """Start delivering events to ``subscription``; return a handle."""
        pass

    @abstractmethod
    async def _close_subscription(self, subscription: Subscription, handle: Any) -> None:
        """Stop delivering events for the handle returned by ``_open_subscription``."""
        pass

    # =========================================================================
    # AUTH
    # =========================================================================

    @abstractmethod
    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> AuthUser:
        """Create an auth identity."""
        pass

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Optional[AuthSession]:
        """Issue a session, or None for bad credentials."""
        pass

    @abstractmethod
    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        """Verify a bearer token and return its identity, or None."""
        pass

    @abstractmethod
    async def list_auth_users(self) -> list[AuthUser]:
        """Return the full authentication directory."""
        pass

    # =========================================================================
    # STORAGE
    # =========================================================================

    @abstractmethod
    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> str:
        """Store an object and return its public URL."""
        pass

    @abstractmethod
    def public_url(self, bucket: str, path: str) -> str:
        """Public URL of a stored object."""
        pass

    # =========================================================================
    # COMPOSITE OPERATIONS
    # =========================================================================

    @abstractmethod
    async def place_order(
        self,
        user_id: str,
        order: Row,
        items: list[Row],
        idempotency_key: Optional[str] = None,
    ) -> Row:
        """
        Insert an order with its items and clear the user's cart as a
        single unit. A repeated ``idempotency_key`` from the same user returns
        the order first created with it and writes nothing.
        """
        pass

    @abstractmethod
    async def update_order_status(self, order_id: str, status: str, note: str) -> Optional[Row]:
        """
        Write an order's status and append its history row as a single
        unit. Returns the updated order, or None if it does not exist.
        """
        pass

    async def health_check(self) -> bool:
        """Verify connectivity to the backend."""
        try:
            await self.count("categories")
            return True
        except GatewayError:
            return False
