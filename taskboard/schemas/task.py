from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def query_value(self) -> str:
        """Value sent as the list filter (`Low`, `Medium`, `High`)."""
        return self.label

    @classmethod
    def parse(cls, raw: Any) -> Optional["Priority"]:
        """Case-insensitive lookup; empty input means "no priority"."""
        if raw is None or isinstance(raw, cls):
            return raw
        text = str(raw).strip().lower()
        if not text:
            return None
        return cls(text)


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @property
    def label(self) -> str:
        return "Ascending" if self is SortOrder.ASC else "Descending"

    @classmethod
    def parse(cls, raw: Any) -> "SortOrder":
        if isinstance(raw, cls):
            return raw
        text = str(raw or "").strip().upper()
        return cls(text) if text else cls.ASC


class Task(BaseModel):
    """A task record as returned by the backend."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., validation_alias=AliasChoices("id", "_id"))
    heading: str = ""
    description: str = ""
    date: str = ""
    time: str = ""
    priority: str = ""
    image: Optional[str] = None
    created_at: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("createdAt", "created_at"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> str:
        # backends hand out ints, UUIDs or ObjectId strings
        return str(value)

    @field_validator("heading", "description", "date", "time", "priority", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


class TaskEnvelope(BaseModel):
    data: Task


class TaskListEnvelope(BaseModel):
    data: List[Task] = Field(default_factory=list)
