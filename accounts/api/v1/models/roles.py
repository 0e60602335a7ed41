from accounts.core.models import Base
from sqlalchemy.orm import mapped_column, Mapped
from typing import Dict, Optional
from sqlalchemy import Boolean, JSON, String
from sqlalchemy.dialects.postgresql import JSONB


class Role(Base):
    """Named bundle of permissions. At most one role is flagged as the default for new users."""
    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String)
    default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    permissions: Mapped[Dict[str, bool]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), default=dict, nullable=False
    )

    def __repr__(self):
        return f"<Role(name='{self.name}', default={self.default})>"
