"""Tests for RestoreService: append-only, atomic restores."""

import uuid

import pytest
from sqlalchemy import func, select

from src.notehistory.core.exceptions import ForbiddenError, NotFoundError
from src.notehistory.core.models.note import Note
from src.notehistory.core.models.note_version import NoteVersion
from src.notehistory.core.services.restore_service import RestoreService


async def history(session, note_id):
    result = await session.execute(
        select(NoteVersion)
        .where(NoteVersion.note_id == note_id)
        .order_by(NoteVersion.version)
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def live_note(session, note_id):
    result = await session.execute(
        select(Note).where(Note.id == note_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


@pytest.mark.asyncio
async def test_restore_appends_undo_and_restored_versions(
    test_session, test_note, test_user, seed_versions
):
    versions = await seed_versions(test_note, test_user, 3)
    service = RestoreService(test_session)

    result = await service.restore_version(test_note.id, versions[0].id, test_user.id)

    assert result.restored_from_version == 1
    assert result.note.content == "content v1"
    assert result.note.title == "Test Note v1"
    assert result.note.has_collaborative_state is True

    rows = await history(test_session, test_note.id)
    assert [v.version for v in rows] == [1, 2, 3, 4, 5]

    undo, restored = rows[3], rows[4]
    assert result.undo_version_id == undo.id
    # undo snapshot keeps the pre-restore live state
    assert undo.title == "Test Note"
    assert undo.content == "This is a test note content"
    assert restored.content == "content v1"
    assert restored.created_by_id == test_user.id

    note = await live_note(test_session, test_note.id)
    assert note.content == "content v1"
    assert note.collaborative_state == b"ydoc-state"


@pytest.mark.asyncio
async def test_restore_never_touches_existing_versions(
    test_session, test_note, test_user, seed_versions
):
    versions = await seed_versions(test_note, test_user, 2)
    before = [(v.id, v.version, v.title, v.content) for v in versions]
    service = RestoreService(test_session)

    await service.restore_version(test_note.id, versions[1].id, test_user.id)

    rows = await history(test_session, test_note.id)
    assert len(rows) == len(before) + 2
    assert [(v.id, v.version, v.title, v.content) for v in rows[:2]] == before


@pytest.mark.asyncio
async def test_restore_target_without_state_clears_live_state(
    test_session, test_note, test_user, seed_versions
):
    versions = await seed_versions(test_note, test_user, 1, collaborative_state=None)
    service = RestoreService(test_session)

    result = await service.restore_version(test_note.id, versions[0].id, test_user.id)

    assert result.note.has_collaborative_state is False
    note = await live_note(test_session, test_note.id)
    assert note.collaborative_state is None

    # the undo snapshot still holds the state that was live before
    rows = await history(test_session, test_note.id)
    assert rows[1].collaborative_state == b"ydoc-state"


@pytest.mark.asyncio
async def test_restore_can_be_undone(test_session, test_note, test_user, seed_versions):
    versions = await seed_versions(test_note, test_user, 2)
    service = RestoreService(test_session)

    first = await service.restore_version(test_note.id, versions[0].id, test_user.id)
    await service.restore_version(test_note.id, first.undo_version_id, test_user.id)

    note = await live_note(test_session, test_note.id)
    assert note.content == "This is a test note content"
    assert len(await history(test_session, test_note.id)) == 6


@pytest.mark.asyncio
async def test_restore_is_atomic(test_session, test_note, test_user, seed_versions, monkeypatch):
    versions = await seed_versions(test_note, test_user, 3)
    service = RestoreService(test_session)

    async def fail_apply(*args, **kwargs):
        raise RuntimeError("crash between undo snapshot and note update")

    monkeypatch.setattr(service.note_repo, "apply_state", fail_apply)

    with pytest.raises(RuntimeError):
        await service.restore_version(test_note.id, versions[0].id, test_user.id)

    assert len(await history(test_session, test_note.id)) == 3
    note = await live_note(test_session, test_note.id)
    assert note.content == "This is a test note content"
    assert note.title == "Test Note"


@pytest.mark.asyncio
async def test_restore_requires_edit_capability(
    test_session, workspace_note, test_user, other_user, add_member, seed_versions
):
    versions = await seed_versions(workspace_note, test_user, 2)
    await add_member(other_user, "viewer")
    service = RestoreService(test_session)

    with pytest.raises(ForbiddenError):
        await service.restore_version(workspace_note.id, versions[0].id, other_user.id)

    assert len(await history(test_session, workspace_note.id)) == 2


@pytest.mark.asyncio
async def test_workspace_editor_can_restore(
    test_session, workspace_note, test_user, other_user, add_member, seed_versions
):
    versions = await seed_versions(workspace_note, test_user, 2)
    await add_member(other_user, "editor")
    service = RestoreService(test_session)

    result = await service.restore_version(workspace_note.id, versions[0].id, other_user.id)

    assert result.restored_from_version == 1
    rows = await history(test_session, workspace_note.id)
    assert rows[-1].created_by_id == other_user.id


@pytest.mark.asyncio
async def test_restore_rejects_version_of_another_note(
    test_session, test_note, workspace_note, test_user, seed_versions
):
    foreign = await seed_versions(workspace_note, test_user, 1)
    service = RestoreService(test_session)

    with pytest.raises(NotFoundError):
        await service.restore_version(test_note.id, foreign[0].id, test_user.id)

    assert await history(test_session, test_note.id) == []


@pytest.mark.asyncio
async def test_restore_missing_note_or_version(test_session, test_note, test_user):
    service = RestoreService(test_session)

    with pytest.raises(NotFoundError):
        await service.restore_version(uuid.uuid4(), uuid.uuid4(), test_user.id)

    with pytest.raises(NotFoundError):
        await service.restore_version(test_note.id, uuid.uuid4(), test_user.id)


@pytest.mark.asyncio
async def test_restore_into_history_with_gaps(test_session, test_note, test_user, seed):
    for number in (1, 7):
        await seed(
            NoteVersion(
                note_id=test_note.id,
                version=number,
                title=f"v{number}",
                content=f"gap v{number}",
                created_by_id=test_user.id,
            )
        )
    first = (await history(test_session, test_note.id))[0]
    service = RestoreService(test_session)

    await service.restore_version(test_note.id, first.id, test_user.id)

    assert [v.version for v in await history(test_session, test_note.id)] == [1, 7, 8, 9]
    count = await test_session.execute(select(func.count(NoteVersion.id)))
    assert count.scalar() == 4
