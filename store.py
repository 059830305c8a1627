import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import List, Optional

from models import Practice, PracticeDraft
from storage import PersistenceAdapter

logger = logging.getLogger(__name__)


class PracticeStore:
    """
    Single source of truth for the Rule of Life.

    Memory is updated first, then the whole collection is written through
    the adapter. A failed write is logged by the adapter and the in-memory
    change stays, so the two can differ until the next successful write.
    """

    def __init__(self, persistence: PersistenceAdapter):
        self.persistence = persistence
        self._practices: List[Practice] = []
        self._last_id = 0
        # read-modify-persist must not interleave between tasks
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._practices)

    async def load(self) -> None:
        practices = await self.persistence.read()
        async with self._lock:
            self._practices = list(practices)
            self._last_id = max((p.id for p in practices), default=self._last_id)
        logger.info(f"Loaded {len(practices)} practices")

    def list(self) -> List[Practice]:
        return list(self._practices)

    def get(self, practice_id: int) -> Optional[Practice]:
        for practice in self._practices:
            if practice.id == practice_id:
                return practice
        return None

    async def add(self, record: PracticeDraft) -> Practice:
        async with self._lock:
            practice = Practice.from_draft(
                record, id=self._next_id(), created_at=datetime.now(timezone.utc)
            )
            self._practices = self._practices + [practice]
            await self.persistence.write(self._practices)
        return practice

    async def update(self, practice_id: int, record: PracticeDraft) -> Optional[Practice]:
        async with self._lock:
            updated = None
            practices = list(self._practices)
            for index, existing in enumerate(practices):
                if existing.id == practice_id:
                    # id and createdAt always come from the stored record
                    updated = Practice.from_draft(
                        record, id=existing.id, created_at=existing.created_at
                    )
                    practices[index] = updated
                    break
            else:
                logger.info(f"Update found no practice with id {practice_id}")

            self._practices = practices
            await self.persistence.write(self._practices)
        return updated

    async def remove(self, practice_id: int) -> bool:
        async with self._lock:
            remaining = [p for p in self._practices if p.id != practice_id]
            removed = len(remaining) != len(self._practices)
            self._practices = remaining
            await self.persistence.write(self._practices)
        return removed

    def _next_id(self) -> int:
        # millisecond clock, bumped past anything already issued
        candidate = time.time_ns() // 1_000_000
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id
