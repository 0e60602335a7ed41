from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    String,
    Uuid,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounts.core.models import Base as BaseModel, utcnow

if TYPE_CHECKING:
    # avoid circular import at runtime; used only for typing
    from accounts.api.v1.models import User


class ProviderName(str, enum.Enum):
    google = "google"
    microsoft = "microsoft"
    apple = "apple"
    github = "github"
    facebook = "facebook"
    twitter = "twitter"


class SocialProfile(BaseModel):
    """Link between a local user and an identity at an external login provider."""
    __tablename__ = "social_profiles"
    __table_args__ = (
        UniqueConstraint("service_name", "user_service_id", name="uq_social_service_user"),
        Index("ix_social_profiles_user_id", "user_id"),
    )

    service_name: Mapped[ProviderName] = mapped_column(
        SAEnum(ProviderName, name="providername_enum", native_enum=True),
        nullable=False,
        index=True,
    )

    user_service_id: Mapped[str] = mapped_column(String(255), nullable=False)  # external 'sub' id
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="social_profiles",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<SocialProfile(id={self.id!s} service={self.service_name.value!s} "
            f"user_service_id={self.user_service_id!s} user_id={self.user_id!s})>"
        )
