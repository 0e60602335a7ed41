from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Uuid
from accounts.core.models.base import Base


class FileEntry(Base):
    """A stored file or folder. Folders group child entries through parent_id."""
    __tablename__ = "file_entries"

    name = Column(String(255), nullable=False)
    file_name = Column(String(255), nullable=True)
    path = Column(String, nullable=True)
    type = Column(String(50), nullable=False, default="file")
    content_type = Column(String, nullable=True)
    size = Column(Integer, nullable=False, default=0)
    parent_id = Column(Uuid(as_uuid=True), ForeignKey("file_entries.id", ondelete="CASCADE"), nullable=True, index=True)

    def __repr__(self):
        return f"<FileEntry(id='{self.id}', name='{self.name}', type='{self.type}')>"


class FileEntryUser(Base):
    """Association between file entries and users; `owner` marks the uploader."""
    __tablename__ = "file_entry_user"

    file_entry_id = Column(Uuid(as_uuid=True), ForeignKey("file_entries.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    owner = Column(Boolean, nullable=False, default=False)
