"""
Stock mutations for sweets (purchase / restock).

Each mutation is a single conditional UPDATE on sweets.quantity followed by one
append to the transactions log, committed together. Nothing is written before
every precondition has been checked, so a rejected call leaves the store
untouched.

Callers pass the session explicitly and an ActorContext describing who is
acting; this module never looks up the current user itself.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.sweet import MAX_STOCK_QUANTITY, Sweet as SweetModel
from db.transaction import SweetTransaction as SweetTransactionModel
from services.errors import (
    Forbidden,
    InsufficientStock,
    InvalidQuantity,
    InventoryError,
    StoreFailure,
    SweetNotFound,
)

logger = logging.getLogger(__name__)

OVER_MAX_STOCK_DETAIL = "Quantity would exceed the maximum stock level"


@dataclass(frozen=True)
class ActorContext:
    actor_id: UUID
    is_admin: bool = False


def _validate_quantity(quantity: Any) -> int:
    # bool is an int subclass; True must not count as 1
    if quantity is None or isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity()
    if quantity <= 0:
        raise InvalidQuantity()
    return quantity


async def _sweet_exists(db: AsyncSession, sweet_id: UUID) -> bool:
    res = await db.execute(select(SweetModel.id).where(SweetModel.id == sweet_id))
    return res.scalar_one_or_none() is not None


async def _take_stock(db: AsyncSession, sweet_id: UUID, quantity: int) -> bool:
    """Decrement quantity only if enough is on hand. Returns False when no row matched."""
    if quantity > MAX_STOCK_QUANTITY:
        # No stored quantity can cover it, and the value would not bind as BIGINT
        return False
    stmt = (
        update(SweetModel)
        .where(SweetModel.id == sweet_id, SweetModel.quantity >= quantity)
        .values(quantity=SweetModel.quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    res = await db.execute(stmt)
    return res.rowcount == 1


async def _add_stock(db: AsyncSession, sweet_id: UUID, quantity: int) -> bool:
    """Increment quantity unless the result would pass MAX_STOCK_QUANTITY."""
    stmt = (
        update(SweetModel)
        .where(SweetModel.id == sweet_id, SweetModel.quantity <= MAX_STOCK_QUANTITY - quantity)
        .values(quantity=SweetModel.quantity + quantity)
        .execution_options(synchronize_session=False)
    )
    res = await db.execute(stmt)
    return res.rowcount == 1


def _append_transaction(
    *,
    db: AsyncSession,
    sweet_id: UUID,
    actor: ActorContext,
    transaction_type: str,
    quantity: int,
) -> SweetTransactionModel:
    record = SweetTransactionModel(
        id=uuid.uuid4(),
        sweet_id=sweet_id,
        user_id=actor.actor_id,
        transaction_type=transaction_type,
        quantity=quantity,
    )
    db.add(record)
    return record


async def _reload(db: AsyncSession, sweet_id: UUID) -> SweetModel:
    sweet = await db.get(SweetModel, sweet_id, populate_existing=True)
    if sweet is None:
        # Row vanished between the UPDATE and the reload
        raise SweetNotFound()
    return sweet


async def _commit_or_fail(db: AsyncSession, action: str, sweet_id: UUID) -> None:
    try:
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.exception("[inventory] %s commit failed for sweet %s", action, sweet_id)
        raise StoreFailure() from e


async def purchase(
    *,
    db: AsyncSession,
    sweet_id: UUID,
    quantity: Optional[int],
    actor: ActorContext,
) -> SweetModel:
    """Sell `quantity` units of a sweet to any authenticated actor."""
    quantity = _validate_quantity(quantity)

    try:
        if not await _take_stock(db, sweet_id, quantity):
            if not await _sweet_exists(db, sweet_id):
                raise SweetNotFound()
            raise InsufficientStock()

        sweet = await _reload(db, sweet_id)
        _append_transaction(
            db=db,
            sweet_id=sweet_id,
            actor=actor,
            transaction_type="purchase",
            quantity=quantity,
        )
        await db.flush()
    except InventoryError as e:
        await db.rollback()
        logger.info("[inventory] purchase rejected sweet=%s actor=%s qty=%s: %s", sweet_id, actor.actor_id, quantity, e.detail)
        raise
    except Exception as e:
        await db.rollback()
        logger.exception("[inventory] purchase failed for sweet %s", sweet_id)
        raise StoreFailure() from e

    await _commit_or_fail(db, "purchase", sweet_id)
    logger.info(
        "[inventory] purchase sweet=%s actor=%s qty=%s stock=%s",
        sweet_id, actor.actor_id, quantity, sweet.quantity,
    )
    return sweet


async def restock(
    *,
    db: AsyncSession,
    sweet_id: UUID,
    quantity: Optional[int],
    actor: ActorContext,
) -> SweetModel:
    """Add `quantity` units to a sweet. Admin only; bounded by MAX_STOCK_QUANTITY."""
    if not actor.is_admin:
        logger.warning("[inventory] restock denied for non-admin actor=%s sweet=%s", actor.actor_id, sweet_id)
        raise Forbidden()
    quantity = _validate_quantity(quantity)
    if quantity > MAX_STOCK_QUANTITY:
        raise InvalidQuantity(OVER_MAX_STOCK_DETAIL)

    try:
        if not await _add_stock(db, sweet_id, quantity):
            if not await _sweet_exists(db, sweet_id):
                raise SweetNotFound()
            raise InvalidQuantity(OVER_MAX_STOCK_DETAIL)

        sweet = await _reload(db, sweet_id)
        _append_transaction(
            db=db,
            sweet_id=sweet_id,
            actor=actor,
            transaction_type="restock",
            quantity=quantity,
        )
        await db.flush()
    except InventoryError as e:
        await db.rollback()
        logger.info("[inventory] restock rejected sweet=%s actor=%s qty=%s: %s", sweet_id, actor.actor_id, quantity, e.detail)
        raise
    except Exception as e:
        await db.rollback()
        logger.exception("[inventory] restock failed for sweet %s", sweet_id)
        raise StoreFailure() from e

    await _commit_or_fail(db, "restock", sweet_id)
    logger.info(
        "[inventory] restock sweet=%s actor=%s qty=%s stock=%s",
        sweet_id, actor.actor_id, quantity, sweet.quantity,
    )
    return sweet
