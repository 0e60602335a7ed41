from accounts.core.models import Base
from sqlalchemy.orm import mapped_column, Mapped
from sqlalchemy import ForeignKey, UniqueConstraint, Uuid
from uuid import UUID


class UserRole(Base):
    """
    Association table linking a User to a Role.
    """
    __tablename__ = "user_role"

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Constraints
    __table_args__ = (
        # A role can be attached to a user only once
        UniqueConstraint('user_id', 'role_id', name='_user_role_uc'),
    )

    def __repr__(self):
        return f"<UserRole(User ID='{self.user_id}', Role ID='{self.role_id}')>"
