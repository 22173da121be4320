from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StrictInt

from schemas.sweets import SweetRead


TransactionType = Literal["purchase", "restock"]


class StockChangeRequest(BaseModel):
    """Body for purchase/restock. A missing quantity is left for the service to reject."""
    model_config = ConfigDict(extra="forbid")

    quantity: Optional[StrictInt] = None


class StockChangeResponse(BaseModel):
    message: str
    item: SweetRead


class TransactionRead(BaseModel):
    id: UUID
    sweet_id: Optional[UUID] = None
    sweet_name: Optional[str] = None
    user_id: Optional[UUID] = None
    transaction_type: TransactionType
    quantity: int
    created_at: Optional[datetime] = None
