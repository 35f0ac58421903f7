import asyncio
import sys
from pathlib import Path

"""
Seed a demo user and a small inventory into the DB.

This script can be run from either:
- backend/: `python scripts/seed_demo_inventory.py`
- repo root: `python backend/scripts/seed_demo_inventory.py`

Items go through the same merge/write-back path as the API, so re-running
the script adds to the existing quantities.
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select

from core.inventory import InventoryItem, load_inventory, merge, write_back
from core.store import SQLAlchemyInventoryStore
from db.database import async_session_maker, create_db_and_tables
from db.users import User

from fastapi_users.password import PasswordHelper


DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "Demo-pass1"

DEMO_ITEMS = [
    ("Apples", 2),
    ("Bananas", 1),
    ("Oranges", 3),
    ("Rice", 1),
    ("Olive oil", 1),
    ("Pasta", 4),
]

password_helper = PasswordHelper()


async def get_or_create_user(session, email: str, password: str) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(
        email=email,
        hashed_password=password_helper.hash(password),
        is_active=True,
        is_superuser=False,
        is_verified=True,
    )
    session.add(user)
    await session.commit()
    return user


async def main() -> None:
    await create_db_and_tables()
    async with async_session_maker() as session:
        user = await get_or_create_user(session, DEMO_EMAIL, DEMO_PASSWORD)
        store = SQLAlchemyInventoryStore(session)

        current = await load_inventory(store, user.id)
        incoming = [InventoryItem(name=name, quantity=qty) for name, qty in DEMO_ITEMS]
        report = await write_back(store, user.id, merge(current, incoming))

        print(f"Seeded {len(report.written)} item(s) for {DEMO_EMAIL}")
        for name, error in report.failed.items():
            print(f"  failed: {name}: {error}")


if __name__ == "__main__":
    asyncio.run(main())
