"""Tests for VersionRepository against SQLite."""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from src.notehistory.core.repositories.version_repository import VersionRepository


@pytest.mark.asyncio
async def test_latest_version_number_without_history(test_session, test_note):
    repo = VersionRepository(test_session)

    assert await repo.get_latest_version_number(test_note.id) == 0
    assert await repo.get_latest(test_note.id) is None
    assert await repo.count_for_note(test_note.id) == 0


@pytest.mark.asyncio
async def test_latest_follows_max_number(test_session, test_note, test_user, seed_versions):
    await seed_versions(test_note, test_user, 3)
    repo = VersionRepository(test_session)

    assert await repo.get_latest_version_number(test_note.id) == 3
    latest = await repo.get_latest(test_note.id)
    assert latest.version == 3
    assert latest.content == "content v3"


@pytest.mark.asyncio
async def test_insert_conflict_only_rolls_back_savepoint(
    test_session, test_note, test_user, seed_versions
):
    await seed_versions(test_note, test_user, 1)
    repo = VersionRepository(test_session)

    with pytest.raises(IntegrityError):
        await repo.insert_version(
            {"note_id": test_note.id, "version": 1, "title": "dup", "created_by_id": test_user.id}
        )

    # the outer transaction is still usable
    version = await repo.insert_version(
        {"note_id": test_note.id, "version": 2, "title": "next", "created_by_id": test_user.id}
    )
    await test_session.commit()

    assert version.version == 2
    assert await repo.count_for_note(test_note.id) == 2


@pytest.mark.asyncio
async def test_get_by_id_and_number(test_session, test_note, test_user, seed_versions):
    versions = await seed_versions(test_note, test_user, 2)
    repo = VersionRepository(test_session)

    found = await repo.get_by_id(versions[0].id)
    assert found.version == 1
    assert found.note.id == test_note.id

    by_number = await repo.get_by_number(test_note.id, 2)
    assert by_number.id == versions[1].id

    assert await repo.get_by_number(test_note.id, 999) is None
    assert await repo.get_by_id(uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_list_for_note_newest_first_with_author(
    test_session, test_note, test_user, seed_versions
):
    await seed_versions(test_note, test_user, 5)
    repo = VersionRepository(test_session)

    rows, total = await repo.list_for_note(test_note.id, page=1, per_page=2)

    assert total == 5
    assert [row.version for row in rows] == [5, 4]
    assert rows[0].created_by_username == test_user.username
    assert rows[0].created_by_full_name == "Test User"

    rows, _ = await repo.list_for_note(test_note.id, page=3, per_page=2)
    assert [row.version for row in rows] == [1]
