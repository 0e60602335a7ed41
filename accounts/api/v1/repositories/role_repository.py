from functools import lru_cache
from typing import Any, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.api.v1.models import Role
from accounts.api.v1.repositories.syncs_permissions import SyncsPermissions
from accounts.core.helpers import coerce_uuids
from accounts.core.repositories import BaseRepository


class RoleRepository(SyncsPermissions, BaseRepository):
    """
    Repository for Role entity.
    """
    def __init__(self):
        super().__init__(Role)

    async def create(self, db: AsyncSession, item, schema=None):
        """Store a role; a new default role takes the flag from the previous one."""
        role = await super().create(db, item)
        if role.default:
            await self.make_default(db, role)
        return schema.model_validate(role) if schema else role

    async def make_default(self, db: AsyncSession, role: Role) -> Role:
        """Flag `role` as the default and clear the flag on every other role."""
        await db.execute(
            update(self.model)
            .where(self.model.id != role.id, self.model.default.is_(True))
            .values(default=False)
            .execution_options(synchronize_session="fetch")
        )
        role.default = True
        await db.commit()
        return role

    async def existing_ids(self, db: AsyncSession, role_ids: Iterable[Any]) -> List[UUID]:
        """
        Filter the given ids down to those that reference a stored role.

        Malformed and unknown ids are dropped; input order is kept.
        """
        candidates = coerce_uuids(role_ids)
        if not candidates:
            return []
        result = await db.execute(select(self.model.id).where(self.model.id.in_(candidates)))
        found = set(result.scalars().all())
        return [role_id for role_id in candidates if role_id in found]

    async def get_default_role(self, db: AsyncSession) -> Optional[Role]:
        result = await db.execute(
            select(self.model).where(self.model.default.is_(True)).order_by(self.model.created_at)
        )
        return result.scalars().first()

    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[Role]:
        result = await db.execute(select(self.model).where(self.model.name == name))
        return result.scalars().first()


@lru_cache()
def get_role_repository() -> RoleRepository:
    """Dependency injector for RoleRepository."""
    return RoleRepository()
