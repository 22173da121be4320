# fastapi-users schemas extended with the shop's full_name profile field

from uuid import UUID
from fastapi_users import schemas
from typing import Optional


class UserRead(schemas.BaseUser[UUID]):
    full_name: Optional[str] = None


class UserCreate(schemas.BaseUserCreate):
    full_name: str


class UserUpdate(schemas.BaseUserUpdate):
    full_name: Optional[str] = None
