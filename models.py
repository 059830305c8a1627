from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------
class Category(str, Enum):
    PRAYER = "prayer"
    SCRIPTURE = "scripture"
    COMMUNITY = "community"
    REST = "rest"
    SERVICE = "service"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    SEASONAL = "seasonal"


# Display order of the frequency buckets
FREQUENCY_ORDER: Tuple[Frequency, ...] = tuple(Frequency)

EDITABLE_FIELDS = {"name", "category", "frequency", "time", "duration", "notes"}


# ------------------------------------------------------------------
# Records
# ------------------------------------------------------------------
class PracticeDraft(BaseModel):
    """In-progress form state. Nothing here is required, the name may be empty."""

    name: str = ""
    category: Category = Category.PRAYER
    frequency: Frequency = Frequency.DAILY
    time: str = ""
    duration: str = ""
    notes: str = ""

    @field_validator("name", "time", "duration", "notes", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    def editable_fields(self) -> dict:
        return self.model_dump(include=EDITABLE_FIELDS)


class Practice(PracticeDraft):
    """A committed practice: identity-bearing, name required, read-only."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    created_at: datetime = Field(alias="createdAt")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be empty")
        return value

    @classmethod
    def from_draft(
        cls, draft: PracticeDraft, *, id: int, created_at: datetime
    ) -> "Practice":
        # The one place a draft becomes a stored record
        return cls(id=id, created_at=created_at, **draft.editable_fields())


class DraftPatch(BaseModel):
    """Partial form edit; only the fields that were sent are applied."""

    name: Optional[str] = None
    category: Optional[Category] = None
    frequency: Optional[Frequency] = None
    time: Optional[str] = None
    duration: Optional[str] = None
    notes: Optional[str] = None


class DraftState(BaseModel):
    draft: PracticeDraft
    editing_id: Optional[int] = None


class SuggestionResponse(BaseModel):
    suggestion: str
