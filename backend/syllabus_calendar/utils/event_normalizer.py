"""
Conversion of a validated ExtractionEnvelope into canonical CalendarEvents.

Rule tables (priority lookup, administrative keywords) are plain data so they
can be tested on their own.
"""
import hashlib
import logging
import re
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional

from syllabus_calendar.models import (
    ActivityItem,
    CalendarEvent,
    EventType,
    ExtractionEnvelope,
    Priority,
    UNDATED_SENTINEL,
)

logger = logging.getLogger(__name__)

PRIORITY_LOOKUP = {
    "urgent": Priority.URGENT,
    "high": Priority.HIGH,
    "medium": Priority.MEDIUM,
    "low": Priority.LOW,
}

# Activities mentioning these are logistics, not calendar items
ADMIN_TITLE_KEYWORDS = [
    "office hours",
    "email",
    "e-mail",
    "contact",
    "class time",
    "conference",
    "blackboard",
    "canvas",
    "twen",
    "attendance",
    "absence",
    "policy",
]

ADMIN_DETAIL_KEYWORDS = [
    "office hours",
    "email",
    "e-mail",
    "contact information",
    "class time",
]


def map_priority(priority: Optional[str]) -> Priority:
    """Case-insensitive priority lookup, medium when unknown."""
    if not isinstance(priority, str):
        return Priority.MEDIUM
    return PRIORITY_LOOKUP.get(priority.strip().lower(), Priority.MEDIUM)


def slugify_title(title: str) -> str:
    """Lower-case, hyphenated ASCII slug of a title.

    Non-ASCII characters are dropped from the slug, so titles containing any
    get a short hash of the full title appended to keep their ids distinct.
    """
    title = title.strip()
    slug = re.sub(r"\s+", "-", title.lower())
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    if title.isascii() and slug.strip("-"):
        return slug

    digest = hashlib.sha1(title.encode("utf-8")).hexdigest()[:10]
    stem = slug.strip("-")
    return f"{stem}-{digest}" if stem else f"event-{digest}"


def generate_event_id(title: str, when: datetime) -> str:
    """Deterministic id: title slug plus ISO date."""
    return f"{slugify_title(title)}-{when.date().isoformat()}"


def parse_iso_date(value: str) -> datetime:
    day = date.fromisoformat(value.strip())
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def is_administrative(activity: ActivityItem) -> bool:
    title = activity.title.lower()
    details = (activity.details or "").lower()
    return any(keyword in title for keyword in ADMIN_TITLE_KEYWORDS) or any(
        keyword in details for keyword in ADMIN_DETAIL_KEYWORDS
    )


def activity_event_type(type_tag: Optional[str]) -> EventType:
    tag = (type_tag or "").strip().lower()
    return EventType.READING if tag.startswith("reading") else EventType.OTHER


def normalize_events(envelope: ExtractionEnvelope) -> List[CalendarEvent]:
    """Turn an envelope into events sorted by date; ties keep encounter order."""
    events: List[CalendarEvent] = []

    for assignment in envelope.assignments:
        when = parse_iso_date(assignment.due_date)
        events.append(CalendarEvent(
            id=generate_event_id(assignment.title, when),
            title=assignment.title,
            description=assignment.details,
            date=when,
            type=EventType.ASSIGNMENT,
            priority=map_priority(assignment.priority),
        ))

    for exam in envelope.exams:
        when = parse_iso_date(exam.date)
        events.append(CalendarEvent(
            id=generate_event_id(exam.title, when),
            title=exam.title,
            description=exam.details,
            date=when,
            time=exam.time,
            type=EventType.EXAM,
            priority=map_priority(exam.priority),
        ))

    for activity in envelope.activities:
        if is_administrative(activity):
            logger.debug("Skipping administrative activity: %s", activity.title)
            continue
        events.append(CalendarEvent(
            id=generate_event_id(activity.title, UNDATED_SENTINEL),
            title=activity.title,
            description=activity.details,
            date=UNDATED_SENTINEL,
            type=activity_event_type(activity.type),
            priority=map_priority(activity.priority),
        ))

    return sorted(events, key=lambda event: event.date)


def deduplicate_events(events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
    """Keep the first event for each id, preserving order."""
    seen = set()
    unique: List[CalendarEvent] = []
    for event in events:
        if event.id in seen:
            continue
        seen.add(event.id)
        unique.append(event)
    return unique
