"""ORM model for application accounts (auth, sessions and RBAC)."""

from enum import StrEnum

from sqlalchemy import Column, Date, DateTime, Enum, Integer, String, Text, func
from sqlalchemy.orm import relationship

from app.models.base import Base


class Role(StrEnum):
    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"
    USER = "USER"


class AccountStatus(StrEnum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class User(Base):
    """
    Account for JWT authentication and role-based access control.

    refresh_token holds the single currently valid refresh token (NULL when
    logged out); rotation replaces it on every refresh.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    birth_date = Column(Date, nullable=True)
    role = Column(
        Enum(Role, name="user_role", native_enum=False, length=32),
        nullable=False,
        default=Role.USER,
    )
    status = Column(
        Enum(AccountStatus, name="user_status", native_enum=False, length=32),
        nullable=False,
        default=AccountStatus.ACTIVE,
    )
    refresh_token = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    todos = relationship(
        "Todo",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    posts = relationship(
        "Post",
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE
