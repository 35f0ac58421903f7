from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from core.config import settings
from core.session import SessionRegistry
from db.database import create_db_and_tables
from routers.inventory import router as inventory_router
from routers.scan import router as scan_router
from routers.export import router as export_router
from routers.users import router as session_router
from core.auth import fastapi_users, auth_backend
from contextlib import asynccontextmanager
from schemas.users import UserRead, UserCreate, UserUpdate

@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    yield
    app.state.sessions.close_all()


app = FastAPI(
    title="Inventory Tracker API",
    description="API for tracking a personal inventory, with photo import and CSV export",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.state.sessions = SessionRegistry(items_per_page=settings.items_per_page)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Authentication routes (fastapi-users)
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"],)
app.include_router(fastapi_users.get_register_router(UserRead, UserCreate), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_users_router(UserRead, UserUpdate), prefix="/users", tags=["users"])
app.include_router(session_router, prefix="/session", tags=["session"])

# Inventory routes
app.include_router(scan_router, prefix="/inventory/scan", tags=["scan"])
app.include_router(export_router, prefix="/inventory/export", tags=["export"])
app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
