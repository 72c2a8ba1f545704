"""
Local Data Gateway Implementation

Stands in for the hosted backend during development and tests.
Used when ENV_MODE=development.

Behavior:
    - Rows live in a SQLAlchemy database (SQLite file by default)
    - Change events are published in-process to open subscriptions
      after each committed write
    - Auth directory with bcrypt password hashes and opaque tokens
    - Uploads are written under DATA_DIRECTORY/media and served at /media
"""

import asyncio
import logging
import secrets
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import bcrypt
from sqlalchemy import delete as sa_delete
from sqlalchemy import DateTime, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from foodzy.core.config import get_settings
from foodzy.database import Base, build_session_maker, create_engine_for, init_db
from foodzy.models import (
    AuthSession as AuthSessionModel,
    AuthUser as AuthUserModel,
    CartItem,
    Order,
    OrderItem,
    OrderStatusHistory,
)
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


def _normalize(value: Any) -> Any:
    # SQLite drops tzinfo on the way back out
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _coerce(model, row: Row) -> Row:
    """Parse ISO-8601 strings for DateTime columns, as the REST backend does."""
    coerced = dict(row)
    for name, value in row.items():
        column = model.__table__.columns.get(name)
        if column is not None and isinstance(column.type, DateTime) and isinstance(value, str):
            coerced[name] = datetime.fromisoformat(value)
    return coerced


class LocalDataGateway(BaseDataGateway):
    """
    SQLAlchemy-backed implementation of the data gateway.

    Attributes:
        database_url: SQLAlchemy async URL
        media_root: Directory uploaded objects are written to
        base_url: Prefix for public object URLs

    Example:
        >>> gateway = LocalDataGateway("sqlite+aiosqlite:///./data/dev.db")
        >>> await gateway.initialize()
        >>> await gateway.insert("categories", {"name": "Burgers"})
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        media_root: Optional[Path] = None,
        base_url: Optional[str] = None,
        hash_rounds: Optional[int] = None,
    ):
        settings = get_settings()
        self.database_url = database_url or settings.local_database_url
        self.media_root = Path(media_root or settings.media_directory)
        self.base_url = (base_url or settings.app_base_url).rstrip("/")
        self.hash_rounds = hash_rounds or settings.password_hash_rounds

        self._engine = create_engine_for(self.database_url, echo=False)
        self._session_maker = build_session_maker(self._engine)
        self._subscriptions: set[Subscription] = set()
        self._models = {
            mapper.class_.__tablename__: mapper.class_
            for mapper in Base.registry.mappers
        }

        logger.info(f"LocalDataGateway initialized ({self._engine.url.get_backend_name()})")

    @property
    def provider_name(self) -> str:
        return "local"

    async def initialize(self) -> None:
        await init_db(self._engine)
        self.media_root.mkdir(parents=True, exist_ok=True)

    async def close(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.close()
        self._subscriptions.clear()
        await self._engine.dispose()

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _model(self, table: str, operation: str):
        model = self._models.get(table)
        if model is None:
            raise GatewayError(f"relation '{table}' does not exist", operation, table)
        return model

    def _column(self, model, name: str, operation: str):
        column = model.__table__.columns.get(name)
        if column is None:
            raise GatewayError(
                f"column '{name}' does not exist", operation, model.__tablename__
            )
        return getattr(model, column.key)

    def _to_row(self, obj) -> Row:
        return {
            column.key: _normalize(getattr(obj, column.key))
            for column in obj.__table__.columns
        }

    def _where(self, stmt, model, eq: Optional[Row], ilike: Optional[dict], operation: str):
        for name, value in (eq or {}).items():
            column = self._column(model, name, operation)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        for name, pattern in (ilike or {}).items():
            stmt = stmt.where(self._column(model, name, operation).ilike(pattern))
        return stmt

    def _build(self, model, row: Row, operation: str):
        unknown = set(row) - set(model.__table__.columns.keys())
        if unknown:
            raise GatewayError(
                f"column '{sorted(unknown)[0]}' does not exist",
                operation,
                model.__tablename__,
            )
        try:
            return model(**_coerce(model, row))
        except ValueError as e:
            raise GatewayError(str(e), operation, model.__tablename__) from e

    def _publish(self, changes: list[ChangeEvent]) -> None:
        for change in changes:
            for subscription in list(self._subscriptions):
                subscription.push(change)

    async def _attach(self, session, rows: list[Row], embeds: Iterable[Embed]) -> None:
        for embed in embeds:
            model = self._model(embed.table, "select")
            keys = {row.get(embed.local_column) for row in rows} - {None}
            grouped: dict[Any, list[Row]] = {}
            if keys:
                column = self._column(model, embed.remote_column, "select")
                result = await session.execute(select(model).where(column.in_(keys)))
                children = [self._to_row(obj) for obj in result.scalars().all()]
                await self._attach(session, children, embed.embed)
                for child in children:
                    grouped.setdefault(child[embed.remote_column], []).append(child)
            for row in rows:
                matches = grouped.get(row.get(embed.local_column), [])
                row[embed.alias] = matches if embed.many else (matches[0] if matches else None)

    # =========================================================================
    # ROWS
    # =========================================================================

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
        model = self._model(table, "select")
        stmt = self._where(select(model), model, eq, ilike, "select")
        if order_by:
            column = self._column(model, order_by, "select")
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                rows = [self._to_row(obj) for obj in result.scalars().all()]
                await self._attach(session, rows, embed)
                return rows
        except SQLAlchemyError as e:
            raise GatewayError(str(e), "select", table) from e

    async def insert(self, table: str, rows: Union[Row, list[Row]]) -> list[Row]:
        model = self._model(table, "insert")
        batch = [rows] if isinstance(rows, dict) else list(rows)
        objects = [self._build(model, row, "insert") for row in batch]

        try:
            async with self._session_maker() as session:
                session.add_all(objects)
                await session.commit()
        except IntegrityError as e:
            raise GatewayError("duplicate key or constraint violation", "insert", table) from e
        except SQLAlchemyError as e:
            raise GatewayError(str(e), "insert", table) from e

        inserted = [self._to_row(obj) for obj in objects]
        self._publish([ChangeEvent(table, "INSERT", new=row) for row in inserted])
        return inserted

    async def update(self, table: str, values: Row, eq: Row) -> list[Row]:
        model = self._model(table, "update")
        for name in values:
            self._column(model, name, "update")
        try:
            values = _coerce(model, values)
        except ValueError as e:
            raise GatewayError(str(e), "update", table) from e
        stmt = self._where(select(model), model, eq, None, "update")

        try:
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                objects = result.scalars().all()
                before = [self._to_row(obj) for obj in objects]
                for obj in objects:
                    for name, value in values.items():
                        setattr(obj, name, value)
                await session.commit()
                after = [self._to_row(obj) for obj in objects]
        except SQLAlchemyError as e:
            raise GatewayError(str(e), "update", table) from e

        self._publish([
            ChangeEvent(table, "UPDATE", new=new, old=old)
            for old, new in zip(before, after)
        ])
        return after

    async def delete(self, table: str, eq: Row) -> int:
        model = self._model(table, "delete")
        stmt = self._where(select(model), model, eq, None, "delete")

        try:
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                objects = result.scalars().all()
                removed = [self._to_row(obj) for obj in objects]
                for obj in objects:
                    await session.delete(obj)
                await session.commit()
        except SQLAlchemyError as e:
            raise GatewayError(str(e), "delete", table) from e

        self._publish([ChangeEvent(table, "DELETE", old=row) for row in removed])
        return len(removed)

    async def count(self, table: str, eq: Optional[Row] = None) -> int:
        model = self._model(table, "count")
        stmt = self._where(select(func.count()).select_from(model), model, eq, None, "count")

        try:
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                return result.scalar() or 0
        except SQLAlchemyError as e:
            raise GatewayError(str(e), "count", table) from e

    # =========================================================================
    # REAL-TIME
    # =========================================================================

    async def _open_subscription(self, subscription: Subscription) -> Any:
        self._model(subscription.table, "subscribe")
        self._subscriptions.add(subscription)
        logger.debug(f"Subscribed to {subscription.table} {subscription.eq or ''}")
        return subscription

    async def _close_subscription(self, subscription: Subscription, handle: Any) -> None:
        self._subscriptions.discard(subscription)
        logger.debug(f"Unsubscribed from {subscription.table}")

    @property
    def active_subscriptions(self) -> int:
        """Number of open subscriptions."""
        return len(self._subscriptions)

    # =========================================================================
    # AUTH
    # =========================================================================

    def _auth_user(self, obj: AuthUserModel) -> AuthUser:
        return AuthUser(
            id=obj.id,
            email=obj.email,
            full_name=obj.full_name,
            phone=obj.phone,
            created_at=_normalize(obj.created_at),
            last_sign_in_at=_normalize(obj.last_sign_in_at),
        )

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> AuthUser:
        password_hash = bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt(rounds=self.hash_rounds)
        ).decode("utf-8")
        user = AuthUserModel(
            email=email.lower(),
            password_hash=password_hash,
            full_name=full_name,
            phone=phone,
        )

        try:
            async with self._session_maker() as session:
                session.add(user)
                await session.commit()
        except IntegrityError as e:
            raise GatewayError("User already registered", "sign_up", "auth_users") from e
        except SQLAlchemyError as e:
            raise GatewayError(str(e), "sign_up", "auth_users") from e

        logger.info(f"Auth user created: {user.email}")
        return self._auth_user(user)

    async def sign_in(self, email: str, password: str) -> Optional[AuthSession]:
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(AuthUserModel).where(AuthUserModel.email == email.lower())
                )
                user = result.scalar_one_or_none()
                if user is None or not bcrypt.checkpw(
                    password.encode("utf-8"), user.password_hash.encode("utf-8")
                ):
                    return None

                token = secrets.token_urlsafe(32)
                user.last_sign_in_at = datetime.now(timezone.utc)
                session.add(AuthSessionModel(token=token, user_id=user.id))
                await session.commit()
                return AuthSession(access_token=token, user=self._auth_user(user))
        except SQLAlchemyError as e:
            raise GatewayError(str(e), "sign_in", "auth_users") from e

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(AuthUserModel)
                    .join(AuthSessionModel, AuthSessionModel.user_id == AuthUserModel.id)
                    .where(AuthSessionModel.token == access_token)
                )
                user = result.scalar_one_or_none()
                return self._auth_user(user) if user else None
        except SQLAlchemyError as e:
            raise GatewayError(str(e), "get_user", "auth_sessions") from e

    async def list_auth_users(self) -> list[AuthUser]:
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(AuthUserModel).order_by(AuthUserModel.created_at.desc())
                )
                return [self._auth_user(user) for user in result.scalars().all()]
        except SQLAlchemyError as e:
            raise GatewayError(str(e), "list_users", "auth_users") from e

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
        target = (self.media_root / bucket / path).resolve()
        if self.media_root.resolve() not in target.parents:
            raise GatewayError("invalid object path", "upload", bucket)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise GatewayError(str(e), "upload", bucket) from e

        logger.info(f"Stored {len(data)} bytes at {bucket}/{path}")
        return self.public_url(bucket, path)

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/media/{bucket}/{path}"

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
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    if idempotency_key:
                        result = await session.execute(
                            select(Order).where(
                                Order.user_id == user_id,
                                Order.idempotency_key == idempotency_key,
                            )
                        )
                        existing = result.scalar_one_or_none()
                        if existing is not None:
                            logger.info(
                                f"Replayed order {existing.order_number} for key {idempotency_key}"
                            )
                            return self._to_row(existing)

                    new_order = self._build(
                        Order,
                        {**order, "user_id": user_id, "idempotency_key": idempotency_key},
                        "place_order",
                    )
                    session.add(new_order)
                    await session.flush()

                    lines = [
                        self._build(OrderItem, {**item, "order_id": new_order.id}, "place_order")
                        for item in items
                    ]
                    session.add_all(lines)

                    result = await session.execute(
                        select(CartItem).where(CartItem.user_id == user_id)
                    )
                    cleared = [self._to_row(obj) for obj in result.scalars().all()]
                    await session.execute(sa_delete(CartItem).where(CartItem.user_id == user_id))
        except IntegrityError as e:
            raise GatewayError("duplicate key or constraint violation", "place_order", "orders") from e
        except SQLAlchemyError as e:
            raise GatewayError(str(e), "place_order", "orders") from e

        placed = self._to_row(new_order)
        self._publish(
            [ChangeEvent("orders", "INSERT", new=placed)]
            + [ChangeEvent("order_items", "INSERT", new=self._to_row(line)) for line in lines]
            + [ChangeEvent("cart_items", "DELETE", old=row) for row in cleared]
        )
        return placed

    async def update_order_status(self, order_id: str, status: str, note: str) -> Optional[Row]:
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    order = await session.get(Order, order_id)
                    if order is None:
                        return None
                    before = self._to_row(order)
                    order.status = status
                    session.add(OrderStatusHistory(order_id=order_id, status=status, notes=note))
                    await session.flush()
                    after = self._to_row(order)
        except SQLAlchemyError as e:
            raise GatewayError(str(e), "update_order_status", "orders") from e

        self._publish([ChangeEvent("orders", "UPDATE", new=after, old=before)])
        return after
