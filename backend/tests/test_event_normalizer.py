"""
Envelope -> CalendarEvent conversion.

Ids must be reproducible, events sorted by date with stable ties, and
administrative activities filtered out.
"""
from datetime import date

import pytest

from conftest import completion_payload
from syllabus_calendar.models import (
    ActivityItem,
    AssignmentItem,
    EventType,
    ExamItem,
    ExtractionEnvelope,
    Priority,
    UNDATED_SENTINEL,
)
from syllabus_calendar.utils.event_normalizer import (
    deduplicate_events,
    generate_event_id,
    is_administrative,
    map_priority,
    normalize_events,
    parse_iso_date,
)
from syllabus_calendar.utils.response_validator import validate_response


def test_brief_due_round_trip():
    envelope = ExtractionEnvelope(assignments=[AssignmentItem(title="Brief Due", due_date="2025-03-14")])

    first = normalize_events(envelope)
    second = normalize_events(envelope)

    assert len(first) == 1
    event = first[0]
    assert event.type == EventType.ASSIGNMENT
    assert event.date.date() == date(2025, 3, 14)
    assert event.id == "brief-due-2025-03-14"
    assert event.id == second[0].id
    assert event.priority == Priority.MEDIUM
    assert event.completed is False


@pytest.mark.parametrize("raw,expected", [
    ("urgent", Priority.URGENT),
    ("HIGH", Priority.HIGH),
    (" Medium ", Priority.MEDIUM),
    ("low", Priority.LOW),
    ("critical", Priority.MEDIUM),
    (None, Priority.MEDIUM),
])
def test_map_priority(raw, expected):
    assert map_priority(raw) == expected


def test_event_ids_distinguish_title_and_date():
    when = parse_iso_date("2025-03-14")
    later = parse_iso_date("2025-03-15")
    ids = {
        generate_event_id("Brief Due", when),
        generate_event_id("Brief Due", later),
        generate_event_id("Reply Brief Due", when),
        generate_event_id("Brief Due 2", when),
    }
    assert len(ids) == 4


def test_event_id_slug_strips_punctuation():
    assert generate_event_id("Memo #2: Draft!", parse_iso_date("2025-01-02")) == "memo-2-draft-2025-01-02"


def test_non_ascii_titles_get_distinct_ids():
    when = parse_iso_date("2025-01-02")
    assert generate_event_id("期中考试", when) != generate_event_id("期末考试", when)
    assert generate_event_id("期中考试", when) == generate_event_id("期中考试", when)


def test_partly_non_ascii_titles_get_distinct_ids():
    when = parse_iso_date("2025-01-02")
    midterm = generate_event_id("期中考试 1", when)
    final = generate_event_id("期末考试 1", when)
    assert midterm != final
    assert midterm.endswith("-2025-01-02")
    assert generate_event_id("Café Reading", when) != generate_event_id("Cafe Reading", when)
    assert generate_event_id("Cafe Reading", when) == "cafe-reading-2025-01-02"


def test_office_hours_activity_is_excluded():
    envelope = ExtractionEnvelope(activities=[
        ActivityItem(title="Office Hours: Mondays 2–4pm"),
        ActivityItem(title="Read pages 38-54", type="reading"),
    ])
    events = normalize_events(envelope)
    assert [e.title for e in events] == ["Read pages 38-54"]


@pytest.mark.parametrize("activity", [
    ActivityItem(title="Email the professor"),
    ActivityItem(title="Attendance Policy"),
    ActivityItem(title="Post on Blackboard"),
    ActivityItem(title="Week 3", details="Class time moved to 10am"),
])
def test_administrative_keywords(activity):
    assert is_administrative(activity)


def test_reading_is_not_administrative():
    assert not is_administrative(ActivityItem(title="Read Hamer v. Sidway, 258-261", type="reading"))


def test_activities_get_sentinel_date_and_type():
    envelope = ExtractionEnvelope(activities=[
        ActivityItem(title="Read chapter 2", type="Reading"),
        ActivityItem(title="Moot court sign-up", type="other"),
    ])
    reading, other = normalize_events(envelope)
    assert reading.type == EventType.READING
    assert other.type == EventType.OTHER
    assert reading.date == UNDATED_SENTINEL
    assert reading.is_undated
    assert reading.id.endswith("-2099-12-31")


def test_events_sorted_by_date_with_stable_ties():
    envelope = ExtractionEnvelope(
        assignments=[
            AssignmentItem(title="Late", due_date="2025-04-01"),
            AssignmentItem(title="Tie A", due_date="2025-02-01"),
        ],
        exams=[
            ExamItem(title="Tie B", date="2025-02-01", time="9:00 AM"),
            ExamItem(title="Early", date="2025-01-10"),
        ],
        activities=[ActivityItem(title="Undated one"), ActivityItem(title="Undated two")],
    )
    events = normalize_events(envelope)
    assert [e.title for e in events] == ["Early", "Tie A", "Tie B", "Late", "Undated one", "Undated two"]
    dates = [e.date for e in events]
    assert dates == sorted(dates)
    assert events[2].time == "9:00 AM"


def test_tbd_exam_survives_as_undated_other_event(llm_envelope):
    outcome = validate_response(completion_payload(llm_envelope))
    events = normalize_events(outcome.data)

    midterm = [e for e in events if e.title == "Midterm Exam"]
    assert len(midterm) == 1
    assert midterm[0].type == EventType.OTHER
    assert midterm[0].date == UNDATED_SENTINEL
    assert midterm[0].priority == Priority.HIGH
    assert all("Office Hours" not in e.title for e in events)
    assert [e.title for e in events] == [
        "Brief Due",
        "Final Exam",
        "Read Hawkins v. McGee, pages 38-54",
        "Midterm Exam",
    ]


def test_deduplicate_events_keeps_first():
    envelope = ExtractionEnvelope(assignments=[
        AssignmentItem(title="Brief Due", due_date="2025-03-14", details="first"),
        AssignmentItem(title="Brief  Due", due_date="2025-03-14", details="second"),
        AssignmentItem(title="Brief Due", due_date="2025-03-21"),
    ])
    events = normalize_events(envelope)
    unique = deduplicate_events(events)
    assert [e.description for e in unique] == ["first", None]
