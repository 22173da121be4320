"""
Append-only stock transaction log.

One row per successful purchase/restock. Rows are never updated; deleting a
sweet keeps its history (sweet_id is nulled).
"""

import uuid

from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from .database import Base


class SweetTransaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_transactions_quantity_positive"),
        CheckConstraint(
            "transaction_type IN ('purchase', 'restock')",
            name="ck_transactions_type",
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    sweet_id = Column(
        UUID(as_uuid=True),
        ForeignKey("sweets.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # 'purchase' | 'restock'
    transaction_type = Column(Text, nullable=False, index=True)
    quantity = Column(BigInteger, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "sweet_id": self.sweet_id,
            "user_id": self.user_id,
            "transaction_type": self.transaction_type,
            "quantity": int(self.quantity),
            "created_at": self.created_at,
        }
