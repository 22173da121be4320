import asyncio
import os
import sys
from decimal import Decimal
from pathlib import Path

"""
Seed demo data (an admin, a customer and a handful of sweets) into the DB.

This script can be run from either:
- backend/: `uv run python scripts/seed_demo_data.py`
- repo root: `uv run python backend/scripts/seed_demo_data.py`

Credentials can be overridden with SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD and
SEED_CUSTOMER_EMAIL / SEED_CUSTOMER_PASSWORD.
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import func, select

from db.database import async_session_maker, create_db_and_tables
from db.sweet import Sweet
from db.users import User

from fastapi_users.password import PasswordHelper


password_helper = PasswordHelper()

DEMO_SWEETS = [
    # (name, category, price, quantity, description)
    ("Dark Chocolate Truffle", "Chocolate", "2.50", 40, "70% cocoa ganache rolled in cocoa powder"),
    ("Milk Chocolate Bar", "Chocolate", "1.80", 60, None),
    ("Strawberry Gummies", "Gummies", "1.20", 120, "Soft gummies with real fruit juice"),
    ("Sour Worms", "Gummies", "1.10", 0, None),
    ("Salted Caramel Fudge", "Fudge", "3.20", 25, "Hand-cut butter fudge"),
    ("Peppermint Humbugs", "Hard Candy", "0.90", 80, None),
    ("Pistachio Baklava", "Pastry", "4.50", 12, "Layered filo with pistachio and honey syrup"),
]


async def get_or_create_user(session, email: str, password: str, full_name: str, is_superuser: bool) -> User:
    result = await session.execute(select(User).where(func.lower(User.email) == email.lower()))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(
        email=email,
        hashed_password=password_helper.hash(password),
        full_name=full_name,
        is_active=True,
        is_superuser=is_superuser,
        is_verified=True,
    )
    session.add(user)
    await session.flush()
    return user


async def get_or_create_sweet(session, name: str, category: str, price: str, quantity: int, description) -> Sweet:
    result = await session.execute(
        select(Sweet).where(func.lower(Sweet.name) == name.strip().lower())
    )
    sweet = result.scalar_one_or_none()
    if sweet:
        return sweet

    sweet = Sweet(
        name=name.strip(),
        category=category,
        price=Decimal(price),
        quantity=quantity,
        description=description,
    )
    session.add(sweet)
    await session.flush()
    return sweet


async def main():
    await create_db_and_tables()

    async with async_session_maker() as session:
        admin = await get_or_create_user(
            session,
            os.getenv("SEED_ADMIN_EMAIL", "admin@example.com"),
            os.getenv("SEED_ADMIN_PASSWORD", "admin-password"),
            "Shop Admin",
            is_superuser=True,
        )
        customer = await get_or_create_user(
            session,
            os.getenv("SEED_CUSTOMER_EMAIL", "customer@example.com"),
            os.getenv("SEED_CUSTOMER_PASSWORD", "customer-password"),
            "Demo Customer",
            is_superuser=False,
        )

        for name, category, price, quantity, description in DEMO_SWEETS:
            await get_or_create_sweet(session, name, category, price, quantity, description)

        await session.commit()

    print(f"Seeded admin={admin.email} customer={customer.email} sweets={len(DEMO_SWEETS)}")


if __name__ == "__main__":
    asyncio.run(main())
