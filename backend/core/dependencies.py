from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user
from core.session import CurrentUser, InventorySession, SessionRegistry
from core.store import InventoryStore, SQLAlchemyInventoryStore
from db.database import get_async_session
from db.users import User


async def get_inventory_store(db: AsyncSession = Depends(get_async_session)) -> InventoryStore:
    return SQLAlchemyInventoryStore(db)


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


async def get_current_user(user: User = Depends(current_active_user)) -> CurrentUser:
    return CurrentUser.from_user(user)


async def get_inventory_session(
    user: CurrentUser = Depends(get_current_user),
    registry: SessionRegistry = Depends(get_session_registry),
) -> InventorySession:
    if not user.is_authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return registry.open(user)
