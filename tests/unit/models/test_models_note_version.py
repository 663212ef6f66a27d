"""
Unit tests for Note and NoteVersion models.
"""

import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InvalidRequestError

from src.notehistory.core.models.note import Note
from src.notehistory.core.models.note_version import ImmutableVersionError, NoteVersion


class TestNoteModel:
    """Test Note model functionality."""

    @pytest.mark.asyncio
    async def test_create_note(self, test_session, test_user):
        """Test creating a personal note with collaborative state."""
        note = Note(
            title="Test Note",
            content="This is test content",
            collaborative_state=b"\x00\x01binary",
            owner_id=test_user.id,
        )

        test_session.add(note)
        await test_session.commit()

        assert isinstance(note.id, uuid.UUID)
        assert note.is_personal is True
        assert note.is_deleted is False
        assert note.has_collaborative_state is True
        assert note.is_owned_by(test_user.id)
        assert note.created_at is not None
        assert note.updated_at is not None

        result = await test_session.execute(
            select(Note.collaborative_state).where(Note.id == note.id)
        )
        assert result.scalar_one() == b"\x00\x01binary"

    def test_note_to_dict_hides_blob(self):
        note = Note(
            id=uuid.uuid4(),
            title="t",
            content=None,
            collaborative_state=b"12345",
            owner_id=uuid.uuid4(),
        )

        data = note.to_dict()
        assert data["collaborative_state"] == 5
        assert data["id"] == str(note.id)

    def test_repr_truncates_title(self):
        note = Note(title="x" * 40, owner_id=uuid.uuid4())
        assert "..." in repr(note)

    @pytest.mark.asyncio
    async def test_versions_collection_is_not_lazy_loaded(self, test_session, test_note):
        """History is read through the repository, never through the relationship."""
        note = await test_session.get(Note, test_note.id)

        with pytest.raises(InvalidRequestError):
            note.versions


class TestNoteVersionModel:
    """Test NoteVersion model functionality."""

    def test_matches_ignores_collaborative_state(self):
        version = NoteVersion(title="A", content="body", collaborative_state=b"one")

        assert version.matches("A", "body")
        assert not version.matches("A", "other body")
        assert not version.matches("B", "body")
        assert version.has_collaborative_state is True

    def test_matches_null_content(self):
        version = NoteVersion(title="A", content=None)
        assert version.matches("A", None)
        assert not version.matches("A", "")

    @pytest.mark.asyncio
    async def test_version_number_unique_per_note(self, test_session, test_note, test_user):
        test_session.add(
            NoteVersion(note_id=test_note.id, version=1, title="a", created_by_id=test_user.id)
        )
        await test_session.flush()

        test_session.add(
            NoteVersion(note_id=test_note.id, version=1, title="b", created_by_id=test_user.id)
        )
        with pytest.raises(IntegrityError):
            await test_session.flush()
        await test_session.rollback()

    @pytest.mark.asyncio
    async def test_same_number_allowed_on_different_notes(
        self, test_session, test_note, workspace_note, test_user
    ):
        for note in (test_note, workspace_note):
            test_session.add(
                NoteVersion(note_id=note.id, version=1, title="a", created_by_id=test_user.id)
            )
        await test_session.commit()

        result = await test_session.execute(select(NoteVersion).where(NoteVersion.version == 1))
        assert len(result.scalars().all()) == 2

    @pytest.mark.asyncio
    async def test_version_is_immutable(self, test_session, test_note, test_user, seed_versions):
        await seed_versions(test_note, test_user, 1)

        result = await test_session.execute(
            select(NoteVersion).where(NoteVersion.note_id == test_note.id)
        )
        version = result.scalar_one()
        version.title = "rewritten history"

        with pytest.raises(ImmutableVersionError):
            await test_session.flush()
        await test_session.rollback()

        result = await test_session.execute(
            select(NoteVersion.title).where(NoteVersion.note_id == test_note.id)
        )
        assert result.scalar_one() == "Test Note v1"

    @pytest.mark.asyncio
    async def test_version_number_must_be_positive(self, test_session, test_note, test_user):
        test_session.add(
            NoteVersion(note_id=test_note.id, version=0, title="zero", created_by_id=test_user.id)
        )
        with pytest.raises(IntegrityError):
            await test_session.flush()
        await test_session.rollback()
