from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from core.dependencies import get_inventory_session, get_inventory_store
from core.inventory import WriteBackReport
from core.logging import get_logger
from core.session import InventorySession
from core.store import InventoryStore, StoreError
from schemas.inventory import InventoryItemCreate

router = APIRouter()
log = get_logger("routers.inventory")


def _view_response(session: InventorySession, report: Optional[WriteBackReport] = None) -> Dict:
    out = session.view.snapshot()
    if report is not None:
        out["write_back"] = report.to_dict()
    return out


def _raise_if_failed(report: WriteBackReport) -> None:
    if report.failed:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to update inventory", "failed": report.failed},
        )


async def _reload(session: InventorySession, store: InventoryStore) -> None:
    try:
        await session.reload(store)
    except StoreError as e:
        log.error("Error fetching inventory for user=%s: %s", session.user.id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching inventory",
        )


@router.get("/", response_model=Dict)
async def get_inventory(
    search: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    session: InventorySession = Depends(get_inventory_session),
    store: InventoryStore = Depends(get_inventory_store),
):
    """Reload the inventory and return the current page of the (filtered) view."""
    await _reload(session, store)
    if search is not None:
        session.search(search)
    if page is not None:
        session.view.go_to_page(page)
    return _view_response(session)


@router.post("/items", response_model=Dict)
async def add_item(
    payload: InventoryItemCreate,
    session: InventorySession = Depends(get_inventory_session),
    store: InventoryStore = Depends(get_inventory_store),
):
    """Add one unit of an item, creating it if needed"""
    try:
        report = await session.add_item(store, payload.name)
    except StoreError as e:
        log.error("Error adding %r for user=%s: %s", payload.name, session.user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error adding item to inventory")
    _raise_if_failed(report)
    return _view_response(session, report)


@router.post("/items/{name:path}/decrement", response_model=Dict)
async def remove_item(
    name: str,
    session: InventorySession = Depends(get_inventory_session),
    store: InventoryStore = Depends(get_inventory_store),
):
    """Remove one unit of an item; the item disappears when it reaches zero"""
    try:
        report = await session.remove_item(store, name)
    except StoreError as e:
        log.error("Error removing %r for user=%s: %s", name, session.user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error removing item from inventory")
    _raise_if_failed(report)
    return _view_response(session, report)


@router.delete("/items/{name:path}", response_model=Dict)
async def delete_item(
    name: str,
    session: InventorySession = Depends(get_inventory_session),
    store: InventoryStore = Depends(get_inventory_store),
):
    try:
        report = await session.delete_item(store, name)
    except StoreError as e:
        log.error("Error deleting %r for user=%s: %s", name, session.user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting item from inventory")
    _raise_if_failed(report)
    return _view_response(session, report)


@router.post("/page/next", response_model=Dict)
async def next_page(session: InventorySession = Depends(get_inventory_session)):
    session.view.next_page()
    return _view_response(session)


@router.post("/page/previous", response_model=Dict)
async def previous_page(session: InventorySession = Depends(get_inventory_session)):
    session.view.previous_page()
    return _view_response(session)
