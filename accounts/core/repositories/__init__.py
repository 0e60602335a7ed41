from .base_repository import BaseRepository
from .file_repository import (
    FileEntryRepository,
    PermanentlyDeleteEntries,
    get_file_repository,
    get_permanently_delete_entries,
)

__all__ = [
    "BaseRepository",
    "FileEntryRepository",
    "PermanentlyDeleteEntries",
    "get_file_repository",
    "get_permanently_delete_entries",
]
