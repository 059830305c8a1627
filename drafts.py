import logging
from typing import Optional

from models import DraftState, Practice, PracticeDraft
from store import PracticeStore

logger = logging.getLogger(__name__)


class DraftController:
    """The single pending create/edit form."""

    def __init__(self, store: PracticeStore):
        self.store = store
        self.draft = PracticeDraft()
        self.editing_id: Optional[int] = None

    def state(self) -> DraftState:
        return DraftState(draft=self.draft, editing_id=self.editing_id)

    def start_create(self) -> None:
        self.draft = PracticeDraft()
        self.editing_id = None

    def start_edit(self, record: Practice) -> None:
        self.draft = PracticeDraft(**record.editable_fields())
        self.editing_id = record.id

    def update_fields(self, **changes) -> PracticeDraft:
        # Re-validate so category/frequency never leave their enums
        self.draft = PracticeDraft.model_validate({**self.draft.model_dump(), **changes})
        return self.draft

    def cancel(self) -> None:
        self.start_create()

    async def commit(self) -> Optional[Practice]:
        """
        Hand the draft to the store. A blank name is ignored on purpose:
        nothing is stored, no error is raised and the draft is kept.
        """
        if not self.draft.name.strip():
            return None

        if self.editing_id is not None:
            practice = await self.store.update(self.editing_id, self.draft)
        else:
            practice = await self.store.add(self.draft)

        self.start_create()
        return practice
