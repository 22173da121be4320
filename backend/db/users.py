from fastapi_users.db import SQLAlchemyBaseUserTableUUID
from sqlalchemy import Column, String
from .database import Base


class User(SQLAlchemyBaseUserTableUUID, Base):
    """fastapi-users account; is_superuser doubles as the shop admin flag"""
    __tablename__ = "users"

    full_name = Column(String, nullable=True)
