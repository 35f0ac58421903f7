"""
Per-user keyed record store.

The reconciliation code only talks to ``InventoryStore``; the SQLAlchemy
implementation below backs it with the ``inventory_items`` table. Each call
commits on its own, there are no multi-record transactions.
"""

from typing import List, Optional, Protocol, Tuple
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db.inventory import InventoryRecord


class StoreError(Exception):
    """A single store operation failed."""


class InventoryStore(Protocol):
    async def list_records(self, user_id: UUID) -> List[Tuple[str, int]]: ...

    async def get_record(self, user_id: UUID, name: str) -> Optional[int]: ...

    async def set_record(self, user_id: UUID, name: str, quantity: int) -> None: ...

    async def delete_record(self, user_id: UUID, name: str) -> None: ...


class SQLAlchemyInventoryStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_records(self, user_id: UUID) -> List[Tuple[str, int]]:
        try:
            result = await self.db.execute(
                select(InventoryRecord.name, InventoryRecord.quantity)
                .where(InventoryRecord.user_id == user_id)
                .order_by(InventoryRecord.name.asc())
            )
            return [(name, int(quantity)) for name, quantity in result.all()]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list inventory: {e}") from e

    async def get_record(self, user_id: UUID, name: str) -> Optional[int]:
        try:
            result = await self.db.execute(
                select(InventoryRecord.quantity).where(
                    InventoryRecord.user_id == user_id,
                    InventoryRecord.name == name,
                )
            )
            quantity = result.scalar_one_or_none()
            return int(quantity) if quantity is not None else None
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read {name!r}: {e}") from e

    async def set_record(self, user_id: UUID, name: str, quantity: int) -> None:
        try:
            record = await self.db.get(InventoryRecord, (user_id, name))
            if record is None:
                self.db.add(InventoryRecord(user_id=user_id, name=name, quantity=quantity))
            else:
                record.quantity = quantity
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(f"Failed to write {name!r}: {e}") from e

    async def delete_record(self, user_id: UUID, name: str) -> None:
        try:
            await self.db.execute(
                delete(InventoryRecord).where(
                    InventoryRecord.user_id == user_id,
                    InventoryRecord.name == name,
                )
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(f"Failed to delete {name!r}: {e}") from e
