from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user
from db.database import get_async_session
from db.sweet import Sweet as SweetModel
from db.users import User
from schemas.sweets import SweetCreate, SweetRead, SweetUpdate

router = APIRouter()


def _require_admin(user: User) -> None:
    if not user.is_superuser:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")


async def _get_sweet_or_404(db: AsyncSession, sweet_id: UUID) -> SweetModel:
    res = await db.execute(select(SweetModel).where(SweetModel.id == sweet_id))
    sweet = res.scalar_one_or_none()
    if not sweet:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sweet not found")
    return sweet


@router.get("", response_model=List[SweetRead])
async def list_sweets(
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Get all sweets, newest first"""
    res = await db.execute(select(SweetModel).order_by(SweetModel.created_at.desc()))
    return [SweetRead(**s.to_schema) for s in res.scalars().all()]


@router.get("/search", response_model=List[SweetRead])
async def search_sweets(
    name: Optional[str] = None,
    category: Optional[str] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    min_price_camel: Optional[float] = Query(None, ge=0, alias="minPrice", include_in_schema=False),
    max_price_camel: Optional[float] = Query(None, ge=0, alias="maxPrice", include_in_schema=False),
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Search by name substring (case-insensitive), exact category and price range"""
    if min_price is None:
        min_price = min_price_camel
    if max_price is None:
        max_price = max_price_camel
    if min_price is not None and max_price is not None and min_price > max_price:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="min_price cannot be greater than max_price",
        )

    stmt = select(SweetModel)
    name = (name or "").strip()
    category = (category or "").strip()
    if name:
        stmt = stmt.where(SweetModel.name.ilike(f"%{name}%"))
    if category:
        stmt = stmt.where(SweetModel.category == category)
    if min_price is not None:
        stmt = stmt.where(SweetModel.price >= min_price)
    if max_price is not None:
        stmt = stmt.where(SweetModel.price <= max_price)

    res = await db.execute(stmt.order_by(SweetModel.created_at.desc()))
    return [SweetRead(**s.to_schema) for s in res.scalars().all()]


@router.get("/{sweet_id}", response_model=SweetRead)
async def get_sweet(
    sweet_id: UUID,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    sweet = await _get_sweet_or_404(db, sweet_id)
    return SweetRead(**sweet.to_schema)


@router.post("", response_model=SweetRead, status_code=status.HTTP_201_CREATED)
async def create_sweet(
    payload: SweetCreate,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Create a sweet (admin only). The initial quantity is taken as given."""
    _require_admin(user)

    sweet = SweetModel(
        name=payload.name,
        category=payload.category,
        price=Decimal(str(payload.price)),
        quantity=payload.quantity,
        description=payload.description,
        image_url=payload.image_url,
    )
    db.add(sweet)
    await db.commit()
    await db.refresh(sweet)
    return SweetRead(**sweet.to_schema)


@router.put("/{sweet_id}", response_model=SweetRead)
async def update_sweet(
    sweet_id: UUID,
    payload: SweetUpdate,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Update catalog fields (admin only)"""
    _require_admin(user)
    sweet = await _get_sweet_or_404(db, sweet_id)

    data = payload.model_dump(exclude_unset=True)
    if data.get("name") is not None:
        sweet.name = data["name"]
    if data.get("category") is not None:
        sweet.category = data["category"]
    if data.get("price") is not None:
        sweet.price = Decimal(str(data["price"]))
    if "description" in data:
        sweet.description = data["description"]
    if "image_url" in data:
        sweet.image_url = data["image_url"]

    await db.commit()
    await db.refresh(sweet)
    return SweetRead(**sweet.to_schema)


@router.delete("/{sweet_id}")
async def delete_sweet(
    sweet_id: UUID,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a sweet (admin only). Its transaction history is kept."""
    _require_admin(user)
    sweet = await _get_sweet_or_404(db, sweet_id)
    await db.delete(sweet)
    await db.commit()
    return {"message": "Sweet deleted successfully"}
