"""
Supabase Data Gateway Implementation

Production implementation on the Supabase platform.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - SUPABASE_URL, SUPABASE_ANON_KEY, SUPABASE_SERVICE_ROLE_KEY
    - Postgres functions ``place_order`` and ``update_order_status``
      and the per-user ``orders.idempotency_key`` column, installed by
      ``supabase/migrations/20261017000000_order_composites.sql``
    - Realtime enabled on the ``orders`` table

Two clients are kept: the service-role client for rows, realtime,
storage and the user directory, and the anon client for password
sign-in and token verification, so signing a user in never changes the
credentials the data client sends.
"""

import logging
from typing import Any, Iterable, Optional, Union

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, AsyncClientOptions, acreate_client
from supabase_auth.errors import AuthError

from foodzy.core.config import get_settings
from foodzy.services.gateway.base import (
    AuthSession,
    AuthUser,
    BaseDataGateway,
    ChangeEvent,
    Embed,
    GatewayError,
    Row,
    Subscription,
)

logger = logging.getLogger(__name__)


def _select_clause(embeds: Iterable[Embed]) -> str:
    parts = ["*"]
    for embed in embeds:
        nested = _select_clause(embed.embed)
        parts.append(f"{embed.alias}:{embed.table}({nested})")
    return ", ".join(parts)


def _auth_user(user: Any) -> AuthUser:
    metadata = getattr(user, "user_metadata", None) or {}
    return AuthUser(
        id=user.id,
        email=user.email,
        full_name=metadata.get("full_name"),
        phone=user.phone or metadata.get("phone"),
        created_at=user.created_at,
        last_sign_in_at=user.last_sign_in_at,
    )


class SupabaseDataGateway(BaseDataGateway):
    """
    Supabase implementation of the data gateway.

    Example:
        >>> gateway = SupabaseDataGateway()
        >>> await gateway.initialize()
        >>> await gateway.select("banners", eq={"is_active": True}, order_by="display_order")
    """

    def __init__(self):
        settings = get_settings()

        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for "
                f"{settings.env_mode.value} mode. "
                "Set them in your .env file or environment variables."
            )

        self._url = settings.supabase_url.rstrip("/")
        self._service_key = settings.supabase_service_role_key
        self._anon_key = settings.supabase_anon_key or settings.supabase_service_role_key
        self._client: Optional[AsyncClient] = None
        self._auth_client: Optional[AsyncClient] = None

        logger.info("SupabaseDataGateway initialized")

    @property
    def provider_name(self) -> str:
        return "supabase"

    async def initialize(self) -> None:
        options = AsyncClientOptions(auto_refresh_token=False, persist_session=False)
        self._client = await acreate_client(self._url, self._service_key, options=options)
        self._auth_client = await acreate_client(self._url, self._anon_key, options=options)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.remove_all_channels()

    @property
    def client(self) -> AsyncClient:
        if self._client is None:
            raise GatewayError("gateway not initialized")
        return self._client

    # =========================================================================
    # ROWS
    # =========================================================================

    async def _run(self, operation: str, table: str, query) -> Any:
        try:
            return await query.execute()
        except APIError as e:
            raise GatewayError(e.message or str(e), operation, table) from e
        except httpx.HTTPError as e:
            raise GatewayError(str(e), operation, table) from e

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
        query = self.client.table(table).select(_select_clause(embed))
        for name, value in (eq or {}).items():
            query = query.is_(name, "null") if value is None else query.eq(name, value)
        for name, pattern in (ilike or {}).items():
            query = query.ilike(name, pattern)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.limit(limit)

        response = await self._run("select", table, query)
        return response.data or []

    async def insert(self, table: str, rows: Union[Row, list[Row]]) -> list[Row]:
        response = await self._run("insert", table, self.client.table(table).insert(rows))
        return response.data or []

    async def update(self, table: str, values: Row, eq: Row) -> list[Row]:
        query = self.client.table(table).update(values)
        for name, value in eq.items():
            query = query.eq(name, value)
        response = await self._run("update", table, query)
        return response.data or []

    async def delete(self, table: str, eq: Row) -> int:
        query = self.client.table(table).delete()
        for name, value in eq.items():
            query = query.eq(name, value)
        response = await self._run("delete", table, query)
        return len(response.data or [])

    async def count(self, table: str, eq: Optional[Row] = None) -> int:
        query = self.client.table(table).select("*", count="exact", head=True)
        for name, value in (eq or {}).items():
            query = query.eq(name, value)
        response = await self._run("count", table, query)
        return response.count or 0

    # =========================================================================
    # REAL-TIME
    # =========================================================================

    async def _open_subscription(self, subscription: Subscription) -> Any:
        table = subscription.table

        def _on_change(payload: dict) -> None:
            data = payload.get("data", payload)
            subscription.push(
                ChangeEvent(
                    table=table,
                    event=(data.get("type") or data.get("eventType") or "").upper(),
                    new=data.get("record") or data.get("new") or {},
                    old=data.get("old_record") or data.get("old") or {},
                )
            )

        filters = {}
        if len(subscription.eq) == 1:
            # Realtime accepts a single column predicate; extra columns are
            # still checked by Subscription.matches
            (name, value), = subscription.eq.items()
            filters["filter"] = f"{name}=eq.{value}"

        channel = self.client.channel(f"{table}-{id(subscription)}")
        channel.on_postgres_changes(
            subscription.event,
            _on_change,
            table=table,
            schema="public",
            **filters,
        )
        await channel.subscribe()
        logger.debug(f"Realtime channel opened for {table}")
        return channel

    async def _close_subscription(self, subscription: Subscription, handle: Any) -> None:
        await self.client.remove_channel(handle)
        logger.debug(f"Realtime channel closed for {subscription.table}")

    # =========================================================================
    # AUTH
    # =========================================================================

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> AuthUser:
        try:
            response = await self._auth_client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"full_name": full_name, "phone": phone}},
            })
        except AuthError as e:
            raise GatewayError(e.message, "sign_up", "auth.users") from e

        if response.user is None:
            raise GatewayError("sign-up returned no user", "sign_up", "auth.users")
        return _auth_user(response.user)

    async def sign_in(self, email: str, password: str) -> Optional[AuthSession]:
        try:
            response = await self._auth_client.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except AuthError as e:
            logger.info(f"Sign-in rejected for {email}: {e.message}")
            return None

        if response.session is None or response.user is None:
            return None
        return AuthSession(
            access_token=response.session.access_token,
            user=_auth_user(response.user),
        )

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        try:
            response = await self._auth_client.auth.get_user(access_token)
        except AuthError:
            return None
        if response is None or response.user is None:
            return None
        return _auth_user(response.user)

    async def list_auth_users(self) -> list[AuthUser]:
        try:
            users = await self.client.auth.admin.list_users()
        except AuthError as e:
            raise GatewayError(e.message, "list_users", "auth.users") from e
        return [_auth_user(user) for user in users]

    # =========================================================================
    # STORAGE
    # =========================================================================

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> str:
        try:
            await self.client.storage.from_(bucket).upload(
                path, data, {"content-type": content_type, "upsert": "true"}
            )
        except Exception as e:
            logger.error(f"Storage upload failed for {bucket}/{path}: {e}")
            raise GatewayError(str(e), "upload", bucket) from e

        return self.public_url(bucket, path)

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self._url}/storage/v1/object/public/{bucket}/{path}"

    # =========================================================================
    # COMPOSITE OPERATIONS
    # =========================================================================

    async def place_order(
        self,
        user_id: str,
        order: Row,
        items: list[Row],
        idempotency_key: Optional[str] = None,
    ) -> Row:
        params = {
            "p_user_id": user_id,
            "p_order": order,
            "p_items": items,
            "p_idempotency_key": idempotency_key,
        }
        response = await self._run("place_order", "orders", self.client.rpc("place_order", params))
        data = response.data
        if isinstance(data, list):
            data = data[0] if data else None
        if not data:
            raise GatewayError("place_order returned no row", "place_order", "orders")
        return data

    async def update_order_status(self, order_id: str, status: str, note: str) -> Optional[Row]:
        params = {"p_order_id": order_id, "p_status": status, "p_note": note}
        response = await self._run(
            "update_order_status",
            "orders",
            self.client.rpc("update_order_status", params),
        )
        data = response.data
        if isinstance(data, list):
            data = data[0] if data else None
        return data or None
