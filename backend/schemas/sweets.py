from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from db.sweet import MAX_STOCK_QUANTITY


class SweetRead(BaseModel):
    id: UUID
    name: str
    category: str
    price: float
    quantity: int
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SweetCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    category: str
    price: float = Field(ge=0)
    quantity: int = Field(default=0, ge=0, le=MAX_STOCK_QUANTITY)
    description: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("name", "category")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("description", "image_url")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class SweetUpdate(BaseModel):
    """Catalog fields only. Stock moves through /inventory purchase and restock."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("name", "category")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = (v or "").strip()
        if not v:
            raise ValueError("cannot be empty")
        return v

    @field_validator("description", "image_url")
    @classmethod
    def _strip_nullable2(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None
