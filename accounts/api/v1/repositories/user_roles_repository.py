from functools import lru_cache
from typing import Any, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.api.v1.models import UserRole
from accounts.core.helpers import coerce_uuids


class UserRolesRepository:
    """
    Writes to the user_role pivot. Every method commits and returns the number
    of pivot rows it inserted or removed.
    """

    async def list_role_ids(self, db: AsyncSession, user_id: UUID) -> List[UUID]:
        result = await db.execute(select(UserRole.role_id).where(UserRole.user_id == user_id))
        return list(result.scalars().all())

    async def attach(self, db: AsyncSession, user_id: UUID, role_ids: Iterable[Any]) -> int:
        current = set(await self.list_role_ids(db, user_id))
        new_ids = [role_id for role_id in coerce_uuids(role_ids) if role_id not in current]
        if not new_ids:
            return 0

        db.add_all([UserRole(user_id=user_id, role_id=role_id) for role_id in new_ids])
        await db.commit()
        return len(new_ids)

    async def detach(self, db: AsyncSession, user_id: UUID, role_ids: Optional[Iterable[Any]] = None) -> int:
        """Detach the given roles, or every role of the user when `role_ids` is None."""
        query = delete(UserRole).where(UserRole.user_id == user_id)
        if role_ids is not None:
            role_ids = coerce_uuids(role_ids)
            if not role_ids:
                return 0
            query = query.where(UserRole.role_id.in_(role_ids))

        result = await db.execute(query.execution_options(synchronize_session=False))
        await db.commit()
        return result.rowcount or 0

    async def sync(self, db: AsyncSession, user_id: UUID, role_ids: Iterable[Any]) -> int:
        """Make the user's roles exactly `role_ids`."""
        desired = coerce_uuids(role_ids)
        current = set(await self.list_role_ids(db, user_id))

        to_detach = current - set(desired)
        detached = await self.detach(db, user_id, to_detach) if to_detach else 0
        attached = await self.attach(db, user_id, desired)
        return attached + detached


@lru_cache()
def get_user_roles_repository() -> UserRolesRepository:
    return UserRolesRepository()
