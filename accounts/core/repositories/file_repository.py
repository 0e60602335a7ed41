import logging
import os
from functools import lru_cache
from typing import Iterable, List, Set
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.core.config import settings
from accounts.core.models import FileEntry, FileEntryUser
from accounts.core.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class FileEntryRepository(BaseRepository):
    def __init__(self):
        super().__init__(FileEntry)

    async def owned_entry_ids(self, db: AsyncSession, user_id: UUID) -> List[UUID]:
        result = await db.execute(
            select(FileEntryUser.file_entry_id)
            .where(FileEntryUser.user_id == user_id, FileEntryUser.owner.is_(True))
        )
        return list(result.scalars().all())

    async def attach_owner(self, db: AsyncSession, entry_id: UUID, user_id: UUID):
        db.add(FileEntryUser(file_entry_id=entry_id, user_id=user_id, owner=True))
        await db.commit()

    async def with_descendants(self, db: AsyncSession, entry_ids: Iterable[UUID]) -> Set[UUID]:
        """Return the given ids plus the ids of every entry nested below them."""
        collected: Set[UUID] = set(entry_ids)
        frontier = set(collected)
        while frontier:
            result = await db.execute(select(FileEntry.id).where(FileEntry.parent_id.in_(frontier)))
            frontier = set(result.scalars().all()) - collected
            collected |= frontier
        return collected


class PermanentlyDeleteEntries:
    """Remove file entries, their stored files and their user links for good."""

    def __init__(self, file_repository: FileEntryRepository, upload_dir: str = settings.UPLOAD_DIR):
        self.file_repository = file_repository
        self.upload_dir = upload_dir

    async def execute(self, db: AsyncSession, entry_ids: Iterable[UUID]) -> int:
        entry_ids = list(entry_ids)
        if not entry_ids:
            return 0

        ids = await self.file_repository.with_descendants(db, entry_ids)
        result = await db.execute(select(FileEntry).where(FileEntry.id.in_(ids)))
        entries = result.scalars().all()

        for entry in entries:
            self._remove_stored_file(entry)

        await db.execute(delete(FileEntryUser).where(FileEntryUser.file_entry_id.in_(ids)))
        await db.execute(delete(FileEntry).where(FileEntry.id.in_(ids)))
        await db.commit()

        logger.info("Permanently deleted %d file entries", len(entries))
        return len(entries)

    def _remove_stored_file(self, entry: FileEntry):
        if entry.type == "folder" or not entry.path:
            return
        path = entry.path if os.path.isabs(entry.path) else os.path.join(self.upload_dir, entry.path)
        if os.path.exists(path):
            os.remove(path)
        else:
            logger.warning("Stored file for entry %s is missing: %s", entry.id, path)


@lru_cache()
def get_file_repository() -> FileEntryRepository:
    return FileEntryRepository()


@lru_cache()
def get_permanently_delete_entries() -> PermanentlyDeleteEntries:
    return PermanentlyDeleteEntries(get_file_repository())
