"""
Generic CRUD Resource for Admin Pages

Every back-office list page follows one contract:
    - List: all rows (optionally joined), filtered by a case-insensitive
      substring over the search fields and an optional equality filter,
      sorted by the configured column
    - Create / Update: insert or update keyed by id
    - Delete: only with explicit confirmation

Rows are filtered after fetching, the same way the back-office pages
always filtered their lists.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, Type, TypeVar

from pydantic import BaseModel

from foodzy.services.gateway import BaseDataGateway, Embed, Row

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)

FILTER_ALL = "all"


class ConfirmationRequired(Exception):
    """Raised when a delete is attempted without confirmation."""

    def __init__(self, entity_name: str, entity_id: str):
        super().__init__("Confirmation required")
        self.entity_name = entity_name
        self.entity_id = entity_id


def _text(value: Any) -> str:
    return "" if value is None else str(value).lower()


def matches_search(row: Row, fields: tuple[str, ...], search: Optional[str]) -> bool:
    """
    Case-insensitive substring match of ``search`` over ``fields``.

    Dotted names reach into embedded rows, e.g. ``profile.full_name``.
    """
    if not search:
        return True
    needle = search.lower()
    for name in fields:
        value: Any = row
        for part in name.split("."):
            value = value.get(part) if isinstance(value, dict) else None
        if needle in _text(value):
            return True
    return False


@dataclass
class CrudResource(Generic[OutputT]):
    """
    Configuration plus operations for one admin-managed table.

    Attributes:
        table: Gateway table name
        entity_name: Human-readable name for messages
        output_schema: Model each row is parsed into
        search_fields: Columns the ``search`` term is matched against
        filter_field: Column compared with the equality filter
        order_by: Sort column for list reads
        prepare: Hook that normalizes a write payload; receives the
            payload and whether it is a create
    """

    table: str
    entity_name: str
    output_schema: Type[OutputT]
    search_fields: tuple[str, ...] = ()
    filter_field: Optional[str] = None
    order_by: Optional[str] = None
    descending: bool = False
    embed: tuple[Embed, ...] = field(default_factory=tuple)
    prepare: Optional[Callable[[Row, bool], Row]] = None

    async def list(
        self,
        gateway: BaseDataGateway,
        search: Optional[str] = None,
        filter_value: Optional[str] = None,
    ) -> list[OutputT]:
        rows = await gateway.select(
            self.table,
            order_by=self.order_by,
            descending=self.descending,
            embed=self.embed,
        )

        if self.filter_field and filter_value and filter_value != FILTER_ALL:
            rows = [row for row in rows if str(row.get(self.filter_field)) == filter_value]
        rows = [row for row in rows if matches_search(row, self.search_fields, search)]

        return [self.output_schema.model_validate(row) for row in rows]

    async def get(self, gateway: BaseDataGateway, entity_id: str) -> Optional[OutputT]:
        row = await gateway.select_one(self.table, eq={"id": entity_id}, embed=self.embed)
        return self.output_schema.model_validate(row) if row else None

    async def create(self, gateway: BaseDataGateway, payload: BaseModel) -> OutputT:
        data = payload.model_dump(mode="json")
        if self.prepare:
            data = self.prepare(data, True)

        rows = await gateway.insert(self.table, data)
        logger.info(f"{self.entity_name} created: {rows[0].get('id')}")
        return await self.get(gateway, rows[0]["id"])

    async def update(
        self,
        gateway: BaseDataGateway,
        entity_id: str,
        payload: BaseModel,
    ) -> Optional[OutputT]:
        data = payload.model_dump(mode="json", exclude_unset=True)
        if self.prepare:
            data = self.prepare(data, False)

        if data:
            rows = await gateway.update(self.table, data, eq={"id": entity_id})
            if not rows:
                return None
            logger.info(f"{self.entity_name} updated: {entity_id}")
        return await self.get(gateway, entity_id)

    async def delete(self, gateway: BaseDataGateway, entity_id: str, confirm: bool) -> bool:
        """
        Delete one row by id.

        Raises:
            ConfirmationRequired: ``confirm`` is false; nothing is deleted
        """
        if not confirm:
            raise ConfirmationRequired(self.entity_name, entity_id)

        removed = await gateway.delete(self.table, eq={"id": entity_id})
        if removed:
            logger.info(f"{self.entity_name} deleted: {entity_id}")
        return removed > 0


# =============================================================================
# PAYLOAD NORMALIZERS
# =============================================================================

def prepare_food_item(data: Row, creating: bool) -> Row:
    """A zero or missing current price falls back to the base price."""
    if (creating or "current_price" in data) and not data.get("current_price"):
        if "base_price" in data:
            data["current_price"] = data["base_price"] or 0.0
        else:
            data.pop("current_price", None)
    return data


def prepare_banner(data: Row, creating: bool) -> Row:
    """Blank start/end times are stored as null."""
    for key in ("start_time", "end_time"):
        if key in data and not data[key]:
            data[key] = None
    return data
