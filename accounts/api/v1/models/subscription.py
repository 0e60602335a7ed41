from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounts.core.models import Base


class Subscription(Base):
    """
    Billing subscription held by a user.
    - `gateway` / `gateway_id` identify the subscription at the billing provider.
    - A subscription is active until cancelled or past `ends_at`.
    """

    __tablename__ = "subscriptions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    gateway: Mapped[str] = mapped_column(String(50), nullable=False, default="none")
    gateway_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    plan_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    cancelled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Null for subscriptions that renew indefinitely
    ends_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="subscriptions",
    )

    @property
    def active(self) -> bool:
        if self.cancelled:
            return False
        if self.ends_at is None:
            return True
        ends_at = self.ends_at
        # SQLite drops tzinfo on the way back
        if ends_at.tzinfo is None:
            ends_at = ends_at.replace(tzinfo=timezone.utc)
        return ends_at > datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return (
            f"<Subscription id={self.id} user_id={self.user_id} "
            f"gateway={self.gateway} cancelled={self.cancelled}>"
        )
