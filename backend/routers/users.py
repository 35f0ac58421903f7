from fastapi import APIRouter, Depends, status

from core.dependencies import get_current_user, get_session_registry
from core.session import CurrentUser, SessionRegistry

router = APIRouter()

# fastapi-users auth/register/users routers are included in main.py;
# this router owns the inventory session lifecycle.


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def end_session(
    user: CurrentUser = Depends(get_current_user),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Drop the cached inventory, view state and pending scan for this user"""
    registry.close(user.id)
