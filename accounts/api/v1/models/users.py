from accounts.core.models import Base
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Boolean, Integer, JSON, String
from sqlalchemy.dialects.postgresql import JSONB
from typing import Dict, List, Optional


class User(Base):
    """Core application user model."""
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(255))
    last_name: Mapped[Optional[str]] = mapped_column(String(255))
    language: Mapped[Optional[str]] = mapped_column(String(10))
    country: Mapped[Optional[str]] = mapped_column(String(100))
    timezone: Mapped[Optional[str]] = mapped_column(String(64))
    confirmed: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    confirmation_code: Mapped[Optional[str]] = mapped_column(String(255))
    api_token: Mapped[Optional[str]] = mapped_column(String(100), unique=True, index=True)
    available_space: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Per-user permission overrides: permission name -> granted flag
    permissions: Mapped[Dict[str, bool]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), default=dict, nullable=False
    )

    # Read side of the user_role pivot; writes go through UserRolesRepository
    roles: Mapped[List["Role"]] = relationship(
        secondary="user_role",
        viewonly=True,
        order_by="Role.name",
    )

    social_profiles: Mapped[List["SocialProfile"]] = relationship(
        back_populates="user", passive_deletes=True
    )
    notifications: Mapped[List["Notification"]] = relationship(
        back_populates="user", passive_deletes=True
    )
    subscriptions: Mapped[List["Subscription"]] = relationship(
        back_populates="user", passive_deletes=True
    )

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.email

    def has_permission(self, name: str) -> bool:
        """Override map first, then any permission granted by one of the loaded roles."""
        if self.permissions and self.permissions.get(name):
            return True
        return any((role.permissions or {}).get(name) for role in self.roles)

    def __repr__(self):
        return f"<User(id='{self.id}', email='{self.email}')>"
