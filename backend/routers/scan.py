import os
from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from core.config import settings
from core.dependencies import get_inventory_session, get_inventory_store
from core.logging import get_logger
from core.session import InventorySession, UnknownScannedItem
from core.store import InventoryStore, StoreError
from core.vision import ScanError, VisionClient, get_vision_client
from schemas.inventory import ScannedItemUpdate

router = APIRouter()
log = get_logger("routers.scan")

ALLOWED_IMAGE_EXTS = {"jpg", "jpeg", "png", "gif", "webp", "heic", "heif"}


def _scan_response(session: InventorySession) -> Dict:
    return {"inventory": [item.to_dict() for item in session.scanned]}


@router.post("", response_model=Dict)
async def scan_image(
    file: Optional[UploadFile] = File(None),
    session: InventorySession = Depends(get_inventory_session),
    vision: VisionClient = Depends(get_vision_client),
):
    """
    Scan an uploaded photo for inventory items.
    The result is kept as the pending scan (all items selected) until it is
    confirmed or discarded; the inventory itself is not touched here.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    content_type = (file.content_type or "").strip().lower()
    ext = os.path.splitext(file.filename)[1].lower().lstrip(".")
    if content_type and content_type != "application/octet-stream":
        if not content_type.startswith("image/"):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please select a valid image file.")
    elif ext not in ALLOWED_IMAGE_EXTS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please select a valid image file.")

    file_data = await file.read()
    if not file_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if len(file_data) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Image size must be less than {settings.max_upload_bytes // (1024 * 1024)}MB",
        )

    try:
        raw = await vision.scan(file_data, content_type=content_type, filename=file.filename)
    except ScanError as e:
        log.error("Error processing the image for user=%s: %s", session.user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error processing the image")

    session.begin_scan(raw)
    return _scan_response(session)


@router.get("", response_model=Dict)
async def get_pending_scan(session: InventorySession = Depends(get_inventory_session)):
    return _scan_response(session)


@router.patch("/{index}", response_model=Dict)
async def edit_scanned_item(
    index: int,
    payload: ScannedItemUpdate,
    session: InventorySession = Depends(get_inventory_session),
):
    """Edit the name, quantity or selection of one pending scanned item"""
    try:
        item = session.edit_scanned(index, name=payload.name, quantity=payload.quantity, selected=payload.selected)
    except UnknownScannedItem as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return item.to_dict()


@router.post("/{index}/toggle", response_model=Dict)
async def toggle_scanned_item(index: int, session: InventorySession = Depends(get_inventory_session)):
    try:
        item = session.toggle_scanned(index)
    except UnknownScannedItem as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return item.to_dict()


@router.post("/confirm", response_model=Dict)
async def confirm_scan(
    session: InventorySession = Depends(get_inventory_session),
    store: InventoryStore = Depends(get_inventory_store),
):
    """
    Merge the selected scanned items into the inventory.
    Records are written one by one; failures are listed under write_back.failed
    and do not stop the remaining writes.
    """
    if not session.scanned:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No scanned items to add")
    try:
        report = await session.confirm_scan(store)
    except StoreError as e:
        log.error("Error uploading scanned items for user=%s: %s", session.user.id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error uploading list of items to inventory",
        )
    out = session.view.snapshot()
    out["write_back"] = report.to_dict()
    return out


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_scan(session: InventorySession = Depends(get_inventory_session)):
    session.cancel_scan()
