import pytest
from pydantic import ValidationError

from drafts import DraftController
from models import Category, Frequency, PracticeDraft


@pytest.fixture
def drafts(store):
    return DraftController(store)


def test_starts_with_defaults(drafts):
    assert drafts.draft == PracticeDraft(
        name="", category=Category.PRAYER, frequency=Frequency.DAILY, time="", duration="", notes=""
    )
    assert drafts.editing_id is None


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
async def test_commit_with_blank_name_is_ignored(drafts, store, kv, name):
    drafts.update_fields(name=name, notes="kept")

    assert await drafts.commit() is None
    assert store.list() == []
    assert kv.set_calls == 0
    assert drafts.draft.notes == "kept"


@pytest.mark.asyncio
async def test_commit_creates_and_resets(drafts, store):
    drafts.update_fields(name="Morning Prayer", time="6:30 AM", duration="15 minutes")

    practice = await drafts.commit()

    assert store.list() == [practice]
    assert practice.time == "6:30 AM"
    assert drafts.draft == PracticeDraft()
    assert drafts.editing_id is None


@pytest.mark.asyncio
async def test_edit_then_commit_updates_in_place(drafts, store):
    original = await store.add(PracticeDraft(name="Morning Prayer"))

    drafts.start_edit(original)
    assert drafts.editing_id == original.id
    assert drafts.draft.name == "Morning Prayer"

    drafts.update_fields(name="Evening Prayer")
    updated = await drafts.commit()

    assert len(store) == 1
    assert updated.name == "Evening Prayer"
    assert updated.id == original.id
    assert updated.created_at == original.created_at
    assert drafts.editing_id is None


@pytest.mark.asyncio
async def test_cancel_discards_edit(drafts, store):
    original = await store.add(PracticeDraft(name="Morning Prayer"))
    drafts.start_edit(original)
    drafts.update_fields(name="Something else")

    drafts.cancel()

    assert drafts.draft == PracticeDraft()
    assert drafts.editing_id is None
    assert store.get(original.id).name == "Morning Prayer"


def test_update_fields_rejects_unknown_category(drafts):
    with pytest.raises(ValidationError):
        drafts.update_fields(category="pilgrimage")
    assert drafts.draft.category is Category.PRAYER


def test_start_create_clears_editing(drafts, store):
    drafts.editing_id = 42
    drafts.update_fields(name="Half typed")

    drafts.start_create()

    assert drafts.editing_id is None
    assert drafts.draft.name == ""
