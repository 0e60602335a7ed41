from .base import Base, utcnow
from .exceptions import ModelNotFoundError
from .file import FileEntry, FileEntryUser

__all__ = ["Base", "FileEntry", "FileEntryUser", "ModelNotFoundError", "utcnow"]
