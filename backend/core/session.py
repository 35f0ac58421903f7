"""
Session controller for signed-in users.

``SessionRegistry`` owns one ``InventorySession`` per user: it is opened on the
first authenticated request and closed on logout, which drops the cached
inventory, the view cursor and any pending scan. The inventory session only
ever sees a frozen ``CurrentUser`` snapshot.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from uuid import UUID

from core import inventory as inv
from core.inventory import InventoryItem, ScannedItem, ViewState, WriteBackReport
from core.logging import get_logger
from core.store import InventoryStore

log = get_logger("session")


@dataclass(frozen=True)
class CurrentUser:
    id: UUID
    email: str
    is_authenticated: bool = True

    @classmethod
    def from_user(cls, user) -> "CurrentUser":
        return cls(id=user.id, email=user.email, is_authenticated=bool(user.is_active))


class UnknownScannedItem(LookupError):
    pass


class InventorySession:
    def __init__(self, user: CurrentUser, items_per_page: int = 10):
        self.user = user
        self.view = ViewState(items_per_page=items_per_page)
        self.scanned: List[ScannedItem] = []

    @property
    def inventory(self) -> List[InventoryItem]:
        return self.view.inventory

    async def reload(self, store: InventoryStore) -> List[InventoryItem]:
        items = await inv.load_inventory(store, self.user.id)
        self.view.set_inventory(items)
        return items

    async def _reload_after(self, store: InventoryStore, report: WriteBackReport) -> WriteBackReport:
        await self.reload(store)
        return report

    async def add_item(self, store: InventoryStore, name: str) -> WriteBackReport:
        report = await inv.increment(store, self.user.id, name)
        return await self._reload_after(store, report)

    async def remove_item(self, store: InventoryStore, name: str) -> WriteBackReport:
        report = await inv.decrement(store, self.user.id, name)
        return await self._reload_after(store, report)

    async def delete_item(self, store: InventoryStore, name: str) -> WriteBackReport:
        report = await inv.delete(store, self.user.id, name)
        return await self._reload_after(store, report)

    # Scanning

    def begin_scan(self, raw: Dict[str, Any]) -> List[ScannedItem]:
        """Replace the pending scan with the vision model's mapping, all selected."""
        self.scanned = [
            ScannedItem(name=inv.normalize(str(name)), quantity=inv.coerce_quantity(quantity))
            for name, quantity in raw.items()
            if inv.normalize(str(name))
        ]
        return self.scanned

    def _scanned_at(self, index: int) -> ScannedItem:
        if index < 0 or index >= len(self.scanned):
            raise UnknownScannedItem(f"No scanned item at position {index}")
        return self.scanned[index]

    def edit_scanned(
        self,
        index: int,
        name: Optional[str] = None,
        quantity: Optional[int] = None,
        selected: Optional[bool] = None,
    ) -> ScannedItem:
        item = self._scanned_at(index)
        if name is not None:
            item.name = name
        if quantity is not None:
            item.quantity = abs(int(quantity))
        if selected is not None:
            item.selected = selected
        return item

    def toggle_scanned(self, index: int) -> ScannedItem:
        item = self._scanned_at(index)
        item.selected = not item.selected
        return item

    def cancel_scan(self) -> None:
        self.scanned = []

    async def confirm_scan(self, store: InventoryStore) -> WriteBackReport:
        """Merge the selected scanned items into the loaded inventory and persist."""
        selected = [InventoryItem(name=s.name, quantity=s.quantity) for s in self.scanned if s.selected]
        current = await self.reload(store)
        stored = {item.name for item in current}
        touched = {inv.normalize(item.name) for item in selected}
        # Only scanned names are written; a zero total for an unstored name has nothing to delete.
        merged = [
            item
            for item in inv.merge(current, selected)
            if item.name in touched and (item.quantity > 0 or item.name in stored)
        ]
        report = await inv.write_back(store, self.user.id, merged)
        if report.failed:
            log.warning("Scan import for user=%s had %d failed record(s)", self.user.id, len(report.failed))
        self.scanned = []
        return await self._reload_after(store, report)

    # View

    def search(self, term: Optional[str]) -> None:
        self.view.apply_search(term)

    def export_records(self) -> List[dict]:
        return [item.to_dict() for item in self.inventory]

    def clear(self) -> None:
        self.view.reset()
        self.scanned = []


class SessionRegistry:
    def __init__(self, items_per_page: int = 10):
        self.items_per_page = items_per_page
        self._sessions: Dict[UUID, InventorySession] = {}

    def open(self, user: CurrentUser) -> InventorySession:
        session = self._sessions.get(user.id)
        if session is None:
            session = InventorySession(user, items_per_page=self.items_per_page)
            self._sessions[user.id] = session
            log.info("Opened inventory session for user=%s", user.id)
        return session

    def get(self, user_id: UUID) -> Optional[InventorySession]:
        return self._sessions.get(user_id)

    def close(self, user_id: UUID) -> bool:
        session = self._sessions.pop(user_id, None)
        if session is None:
            return False
        session.clear()
        log.info("Closed inventory session for user=%s", user_id)
        return True

    def close_all(self) -> None:
        for user_id in list(self._sessions):
            self.close(user_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id) -> bool:
        return user_id in self._sessions
