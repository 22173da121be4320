from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user, current_actor
from db.database import get_async_session
from db.sweet import Sweet as SweetModel
from db.transaction import SweetTransaction as SweetTransactionModel
from db.users import User
from schemas.inventory import (
    StockChangeRequest,
    StockChangeResponse,
    TransactionRead,
    TransactionType,
)
from schemas.sweets import SweetRead
from services import inventory as inventory_service
from services.errors import InventoryError
from services.inventory import ActorContext

router = APIRouter()


@router.post("/sweets/{sweet_id}/purchase", response_model=StockChangeResponse)
async def purchase_sweet(
    sweet_id: UUID,
    payload: StockChangeRequest,
    actor: ActorContext = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    """Buy `quantity` units of a sweet. Any authenticated user."""
    try:
        sweet = await inventory_service.purchase(
            db=db,
            sweet_id=sweet_id,
            quantity=payload.quantity,
            actor=actor,
        )
    except InventoryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return {"message": "Purchase successful", "item": SweetRead(**sweet.to_schema)}


@router.post("/sweets/{sweet_id}/restock", response_model=StockChangeResponse)
async def restock_sweet(
    sweet_id: UUID,
    payload: StockChangeRequest,
    actor: ActorContext = Depends(current_actor),
    db: AsyncSession = Depends(get_async_session),
):
    """Add `quantity` units to a sweet. Admin only."""
    try:
        sweet = await inventory_service.restock(
            db=db,
            sweet_id=sweet_id,
            quantity=payload.quantity,
            actor=actor,
        )
    except InventoryError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return {"message": "Restock successful", "item": SweetRead(**sweet.to_schema)}


@router.get("/transactions", response_model=List[TransactionRead])
async def list_transactions(
    sweet_id: Optional[UUID] = None,
    transaction_type: Optional[TransactionType] = None,
    limit: int = Query(200, ge=1, le=1000),
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Audit trail of stock changes, newest first."""
    if not user.is_superuser:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")

    stmt = select(SweetTransactionModel, SweetModel.name).outerjoin(
        SweetModel, SweetTransactionModel.sweet_id == SweetModel.id
    )
    if sweet_id:
        stmt = stmt.where(SweetTransactionModel.sweet_id == sweet_id)
    if transaction_type:
        stmt = stmt.where(SweetTransactionModel.transaction_type == transaction_type)

    stmt = stmt.order_by(SweetTransactionModel.created_at.desc()).limit(limit)
    res = await db.execute(stmt)
    out = []
    for (tx, sweet_name) in res.all():
        out.append(TransactionRead(**tx.to_schema, sweet_name=sweet_name))
    return out
