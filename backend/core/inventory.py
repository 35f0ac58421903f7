"""
Inventory reconciliation and view model.

- normalize(): canonical item names (trim + lower-case)
- merge(): ordered accumulator over current + incoming items
- write_back(): independent per-record set/delete against a store
- filter_inventory() / paginate() / ViewState: the read path
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from core.logging import get_logger
from core.store import InventoryStore, StoreError

log = get_logger("reconcile")


@dataclass(frozen=True)
class InventoryItem:
    name: str
    quantity: int

    def to_dict(self) -> dict:
        return {"name": self.name, "quantity": self.quantity}


@dataclass
class ScannedItem:
    """One item proposed by an image scan, waiting for the user to confirm it."""
    name: str
    quantity: int
    selected: bool = True

    def to_dict(self) -> dict:
        return {"name": self.name, "quantity": self.quantity, "selected": self.selected}


@dataclass
class WriteBackReport:
    written: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict:
        return {"written": list(self.written), "deleted": list(self.deleted), "failed": dict(self.failed)}


def normalize(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def coerce_quantity(value) -> int:
    """Clamp an untrusted quantity to a non-negative int (bad values become 0)."""
    if isinstance(value, bool):
        return 0
    try:
        quantity = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, quantity)


def merge(current: Iterable[InventoryItem], incoming: Iterable[InventoryItem]) -> List[InventoryItem]:
    """Sum quantities per canonical name, keeping first-seen order."""
    combined: Dict[str, int] = {}
    for items in (current, incoming):
        for item in items:
            name = normalize(item.name)
            if not name:
                continue
            combined[name] = combined.get(name, 0) + int(item.quantity)
    return [InventoryItem(name=name, quantity=quantity) for name, quantity in combined.items()]


async def write_back(store: InventoryStore, user_id, merged: Sequence[InventoryItem]) -> WriteBackReport:
    """Persist merged totals one record at a time.

    A total of zero (or below) deletes the record; anything else overwrites
    the stored quantity. A failed record does not stop the rest of the batch.
    """
    report = WriteBackReport()
    for item in merged:
        try:
            if item.quantity <= 0:
                await store.delete_record(user_id, item.name)
                report.deleted.append(item.name)
            else:
                await store.set_record(user_id, item.name, item.quantity)
                report.written.append(item.name)
        except StoreError as e:
            log.error("Write-back failed for user=%s item=%r: %s", user_id, item.name, e)
            report.failed[item.name] = str(e)
    return report


async def load_inventory(store: InventoryStore, user_id) -> List[InventoryItem]:
    records = await store.list_records(user_id)
    return [InventoryItem(name=name, quantity=quantity) for name, quantity in records]


async def adjust_item(store: InventoryStore, user_id, name: str, delta: int) -> WriteBackReport:
    """Add ``delta`` to a single item through the merge/write-back path."""
    key = normalize(name)
    if not key:
        return WriteBackReport()
    existing = await store.get_record(user_id, key)
    current = [InventoryItem(name=key, quantity=existing)] if existing is not None else []
    return await write_back(store, user_id, merge(current, [InventoryItem(name=key, quantity=delta)]))


async def increment(store: InventoryStore, user_id, name: str) -> WriteBackReport:
    return await adjust_item(store, user_id, name, 1)


async def decrement(store: InventoryStore, user_id, name: str) -> WriteBackReport:
    return await adjust_item(store, user_id, name, -1)


async def delete(store: InventoryStore, user_id, name: str) -> WriteBackReport:
    key = normalize(name)
    if not key:
        return WriteBackReport()
    return await write_back(store, user_id, [InventoryItem(name=key, quantity=0)])


def filter_inventory(inventory: List[InventoryItem], search_term: Optional[str]) -> List[InventoryItem]:
    if not search_term:
        return inventory
    term = search_term.lower()
    return [item for item in inventory if term in normalize(item.name)]


def paginate(filtered: Sequence[InventoryItem], page: int, page_size: int) -> List[InventoryItem]:
    start = max(0, (page - 1) * page_size)
    return list(filtered[start:start + page_size])


def total_pages(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size))


class ViewState:
    """Search + pagination cursor over one user's inventory."""

    def __init__(self, items_per_page: int = 10):
        if items_per_page < 1:
            raise ValueError("items_per_page must be at least 1")
        self.items_per_page = items_per_page
        self.search_term = ""
        self.current_page = 1
        self.total_pages = 1
        self._inventory: List[InventoryItem] = []
        self._filtered: List[InventoryItem] = []

    @property
    def inventory(self) -> List[InventoryItem]:
        return self._inventory

    @property
    def filtered(self) -> List[InventoryItem]:
        return self._filtered

    def _recompute(self) -> None:
        self._filtered = filter_inventory(self._inventory, self.search_term)
        self.total_pages = total_pages(len(self._filtered), self.items_per_page)
        self.current_page = min(max(1, self.current_page), self.total_pages)

    def set_inventory(self, inventory: List[InventoryItem]) -> None:
        self._inventory = list(inventory)
        self._recompute()

    def apply_search(self, search_term: Optional[str]) -> None:
        self.search_term = search_term or ""
        self.current_page = 1
        self._recompute()

    def go_to_page(self, page: int) -> None:
        self.current_page = min(max(1, page), self.total_pages)

    def next_page(self) -> None:
        if self.current_page < self.total_pages:
            self.current_page += 1

    def previous_page(self) -> None:
        if self.current_page > 1:
            self.current_page -= 1

    def page_items(self) -> List[InventoryItem]:
        return paginate(self._filtered, self.current_page, self.items_per_page)

    def reset(self) -> None:
        self.search_term = ""
        self.current_page = 1
        self.set_inventory([])

    def snapshot(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.page_items()],
            "search": self.search_term,
            "page": self.current_page,
            "total_pages": self.total_pages,
            "items_per_page": self.items_per_page,
            "total_items": len(self._filtered),
        }
