import json

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from core.dependencies import get_current_user
from core.export import ExportError, inventory_to_csv
from core.logging import get_logger
from core.session import CurrentUser

router = APIRouter()
log = get_logger("routers.export")


@router.post("", response_class=Response)
async def export_inventory(request: Request, user: CurrentUser = Depends(get_current_user)):
    """
    Convert the posted inventory (a JSON list of {name, quantity}) to CSV.
    Any malformed record rejects the whole export with 400.
    """
    try:
        inventory = json.loads(await request.body() or b"null")
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid inventory data")

    try:
        csv_text = inventory_to_csv(inventory)
    except ExportError as e:
        log.warning("Rejected inventory export for user=%s: %s", user.id, e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid inventory data")

    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=inventory.csv"},
    )
