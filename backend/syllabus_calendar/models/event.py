"""Canonical calendar records produced by an extraction run."""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Marks "no specific date known". Never a real deadline.
UNDATED_SENTINEL = datetime(2099, 12, 31, tzinfo=timezone.utc)


class EventType(str, Enum):
    ASSIGNMENT = "assignment"
    EXAM = "exam"
    READING = "reading"
    CLASS = "class"
    DEADLINE = "deadline"
    OTHER = "other"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class CalendarEvent(BaseModel):
    """One dated (or sentinel-dated) item on the student's calendar."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: Optional[str] = None
    date: datetime
    time: Optional[str] = None
    type: EventType
    priority: Priority = Priority.MEDIUM
    completed: bool = False

    @property
    def is_undated(self) -> bool:
        return self.date == UNDATED_SENTINEL


class ParsedSyllabus(BaseModel):
    model_config = ConfigDict(frozen=True)

    course_name: str
    course_code: str
    semester: str
    year: int
    events: List[CalendarEvent] = Field(default_factory=list)
    raw_text: str
    parsed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
