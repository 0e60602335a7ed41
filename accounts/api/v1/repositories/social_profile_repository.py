from functools import lru_cache
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.api.v1.models import SocialProfile
from accounts.core.repositories import BaseRepository


class SocialProfileRepository(BaseRepository):
    def __init__(self):
        super().__init__(SocialProfile)

    async def delete_for_user(self, db: AsyncSession, user_id: UUID) -> int:
        result = await db.execute(
            delete(self.model).where(self.model.user_id == user_id).execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount or 0


@lru_cache()
def get_social_profile_repository() -> SocialProfileRepository:
    return SocialProfileRepository()
