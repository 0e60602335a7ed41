from typing import Any, Generic, List, Mapping, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError

from accounts.core.models import Base


T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    def __init__(self, model: Type[T]):
        self.model = model

    async def create(self, db: AsyncSession, item, schema=None):
        """Insert `item` (a mapping or a pydantic model) and return the stored row, or `schema` of it."""
        values = item if isinstance(item, Mapping) else item.model_dump()
        instance = self.model(**values)
        db.add(instance)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ValueError(f"Creating {self.model.__name__}: an error occurred. {str(e)}")

        await db.refresh(instance)
        return schema.model_validate(instance) if schema else instance

    async def get_by_id(self, db: AsyncSession, item_id, schema=None) -> Optional[Any]:
        item = await self._get_by_id_orm(db, item_id)
        if item is None:
            return None
        return schema.model_validate(item) if schema else item

    async def _get_by_id_orm(self, db: AsyncSession, item_id) -> Optional[T]:
        result = await db.execute(select(self.model).filter(self.model.id == item_id))
        return result.scalars().first()

    async def get_all(self, db: AsyncSession, skip: int = 0, limit: int = 20, schema=None) -> List[Any]:
        result = await db.execute(
            select(self.model).order_by(self.model.created_at).offset(skip).limit(limit)
        )
        items = result.scalars().all()
        if schema:
            return [schema.model_validate(item) for item in items]
        return list(items)
