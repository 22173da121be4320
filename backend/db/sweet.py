import uuid
from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from .database import Base


# Largest stock a BIGINT column holds; quantities above it are rejected before SQL
MAX_STOCK_QUANTITY = 2**63 - 1


class Sweet(Base):
    """Catalog item. quantity is only changed through services.inventory."""
    __tablename__ = "sweets"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_sweets_quantity_non_negative"),
        CheckConstraint("price >= 0", name="ck_sweets_price_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(BigInteger, nullable=False, default=0)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "price": float(self.price) if self.price is not None else None,
            "quantity": int(self.quantity or 0),
            "description": self.description,
            "image_url": self.image_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
