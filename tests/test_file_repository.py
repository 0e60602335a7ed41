from uuid import uuid4

import pytest
from sqlalchemy import select

from accounts.core.models import FileEntry, FileEntryUser
from accounts.core.repositories import PermanentlyDeleteEntries


pytestmark = pytest.mark.unit


@pytest.fixture
def delete_entries(file_repository, upload_dir):
    return PermanentlyDeleteEntries(file_repository, upload_dir=str(upload_dir))


@pytest.fixture
async def tree(db, file_repository):
    """root/ -> nested/ -> deep.txt, root/ -> top.txt, plus an unrelated other.txt"""
    root = await file_repository.create(db, {"name": "root", "type": "folder"})
    nested = await file_repository.create(db, {"name": "nested", "type": "folder", "parent_id": root.id})
    deep = await file_repository.create(db, {"name": "deep.txt", "path": "deep.txt", "parent_id": nested.id})
    top = await file_repository.create(db, {"name": "top.txt", "path": "top.txt", "parent_id": root.id})
    other = await file_repository.create(db, {"name": "other.txt", "path": "other.txt"})
    return {"root": root, "nested": nested, "deep": deep, "top": top, "other": other}


async def stored_ids(db):
    result = await db.execute(select(FileEntry.id))
    return set(result.scalars().all())


async def test_with_descendants_walks_the_whole_tree(db, file_repository, tree):
    ids = await file_repository.with_descendants(db, [tree["root"].id])

    assert ids == {tree[name].id for name in ("root", "nested", "deep", "top")}


async def test_owned_entry_ids_only_returns_owned_links(db, file_repository, tree):
    user_id = uuid4()
    await file_repository.attach_owner(db, tree["root"].id, user_id)
    db.add(FileEntryUser(file_entry_id=tree["other"].id, user_id=user_id, owner=False))
    await db.commit()

    assert await file_repository.owned_entry_ids(db, user_id) == [tree["root"].id]


async def test_execute_removes_entries_files_and_links(db, file_repository, delete_entries, upload_dir, tree):
    for name in ("deep.txt", "top.txt", "other.txt"):
        (upload_dir / name).write_text(name)
    user_id = uuid4()
    await file_repository.attach_owner(db, tree["root"].id, user_id)

    deleted = await delete_entries.execute(db, [tree["root"].id])

    assert deleted == 4
    assert await stored_ids(db) == {tree["other"].id}
    assert not (upload_dir / "deep.txt").exists()
    assert not (upload_dir / "top.txt").exists()
    assert (upload_dir / "other.txt").exists()
    assert await file_repository.owned_entry_ids(db, user_id) == []


async def test_missing_stored_file_is_logged_and_skipped(db, delete_entries, tree, caplog):
    with caplog.at_level("WARNING"):
        deleted = await delete_entries.execute(db, [tree["other"].id])

    assert deleted == 1
    assert "Stored file for entry" in caplog.text


async def test_empty_input_does_nothing(db, delete_entries, tree):
    assert await delete_entries.execute(db, []) == 0
    assert len(await stored_ids(db)) == 5
