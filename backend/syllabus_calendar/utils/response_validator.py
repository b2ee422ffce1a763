"""
Validation and repair of the raw completion payload.

validate_response() is total: it never raises and always reports exactly one
of success or failure. Assignments and exams whose date cannot be trusted are
reclassified as undated activities instead of being dropped.
"""
import json
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Mapping, Optional

from syllabus_calendar.models import (
    ActivityItem,
    AssignmentItem,
    CourseInfo,
    ExamItem,
    ExtractionEnvelope,
)

logger = logging.getLogger(__name__)

ISO_DATE_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Tokens models emit when they do not know the date
PLACEHOLDER_TOKENS = ["XX", "TBD", "TBA"]

REQUIRED_FIELDS = ("assignments", "exams", "activities")

NO_CONTENT = "no-content"
MALFORMED_JSON = "malformed-json"
MISSING_FIELDS = "missing-fields"


@dataclass(frozen=True)
class ValidationOutcome:
    success: bool
    data: Optional[ExtractionEnvelope] = None
    error: Optional[str] = None
    code: Optional[str] = None
    repaired: int = 0


def is_placeholder_date(value: str) -> bool:
    upper = value.upper()
    return any(token in upper for token in PLACEHOLDER_TOKENS)


def is_valid_iso_date(value: Any) -> bool:
    """True for an unambiguous YYYY-MM-DD string naming a real calendar day."""
    if not isinstance(value, str):
        return False
    value = value.strip()
    if is_placeholder_date(value) or not ISO_DATE_REGEX.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _title(item: Mapping) -> str:
    return _text(item.get("title")) or "Untitled Task"


def _year(value: Any) -> Optional[int]:
    # json accepts Infinity and NaN, neither is_integer()
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        return None
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError, OverflowError):
        return None


def _confidence(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        score = float(value)
    except ValueError:
        return None
    return max(0.0, min(100.0, score))


def _content_of(payload: Any) -> Optional[str]:
    """Pull choices[0].message.content out of a dict or SDK object payload."""
    try:
        if isinstance(payload, Mapping):
            content = payload["choices"][0]["message"]["content"]
        else:
            content = payload.choices[0].message.content
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
    if not isinstance(content, str) or not content.strip():
        return None
    return content


def _to_activity(item: Any) -> Optional[ActivityItem]:
    if isinstance(item, str):
        return ActivityItem(title=item.strip() or "Untitled Task")
    if not isinstance(item, Mapping):
        return None
    return ActivityItem(
        title=_title(item),
        details=_text(item.get("details")),
        type=_text(item.get("type")) or "other",
        priority=_text(item.get("priority")),
    )


def _reclassify(item: Mapping, raw_date: Any, label: str) -> ActivityItem:
    date_note = f"{label}: {_text(raw_date) or 'not specified'}"
    details = _text(item.get("details"))
    details = f"{details} ({date_note})" if details else date_note
    return ActivityItem(
        title=_title(item),
        details=details,
        type="other",
        priority=_text(item.get("priority")) or "medium",
    )


def validate_response(payload: Any) -> ValidationOutcome:
    """Parse, check and repair a completion payload into an ExtractionEnvelope."""
    try:
        return _validate(payload)
    except Exception as e:
        logger.exception("Unexpected error while validating LLM response")
        return ValidationOutcome(
            success=False, code=MALFORMED_JSON, error=f"Invalid LLM response: {e}"
        )


def _validate(payload: Any) -> ValidationOutcome:
    content = _content_of(payload)
    if content is None:
        return ValidationOutcome(success=False, code=NO_CONTENT, error="No content in LLM response")

    try:
        parsed = json.loads(content)
    except (json.JSONDecodeError, TypeError, ValueError) as e:
        return ValidationOutcome(
            success=False, code=MALFORMED_JSON, error=f"Failed to parse LLM response: {e}"
        )

    if not isinstance(parsed, dict):
        return ValidationOutcome(
            success=False, code=MALFORMED_JSON, error="LLM response is not a JSON object"
        )

    missing = [name for name in REQUIRED_FIELDS if not isinstance(parsed.get(name), list)]
    if missing:
        return ValidationOutcome(
            success=False,
            code=MISSING_FIELDS,
            error=f"Missing required fields in LLM response: {', '.join(missing)}",
        )

    assignments: List[AssignmentItem] = []
    exams: List[ExamItem] = []
    activities: List[ActivityItem] = []
    reclassified: List[ActivityItem] = []

    for item in parsed["activities"]:
        activity = _to_activity(item)
        if activity is not None:
            activities.append(activity)

    for item in parsed["assignments"]:
        if not isinstance(item, Mapping):
            activity = _to_activity(item)
            if activity is not None:
                reclassified.append(activity)
            continue
        due_date = item.get("due_date")
        if not is_valid_iso_date(due_date):
            logger.info("Moving assignment with invalid date to activities: %r", due_date)
            reclassified.append(_reclassify(item, due_date, "Due date"))
            continue
        assignments.append(AssignmentItem(
            title=_title(item),
            due_date=due_date.strip(),
            details=_text(item.get("details")),
            priority=_text(item.get("priority")),
        ))

    for item in parsed["exams"]:
        if not isinstance(item, Mapping):
            activity = _to_activity(item)
            if activity is not None:
                reclassified.append(activity)
            continue
        exam_date = item.get("date")
        if not is_valid_iso_date(exam_date):
            logger.info("Moving exam with invalid date to activities: %r", exam_date)
            reclassified.append(_reclassify(item, exam_date, "Exam date"))
            continue
        exams.append(ExamItem(
            title=_title(item),
            date=exam_date.strip(),
            time=_text(item.get("time")),
            details=_text(item.get("details")),
            priority=_text(item.get("priority")),
        ))

    course_info = None
    raw_info = parsed.get("course_info")
    if isinstance(raw_info, Mapping):
        course_info = CourseInfo(
            course_name=_text(raw_info.get("course_name")),
            course_code=_text(raw_info.get("course_code")),
            semester=_text(raw_info.get("semester")),
            year=_year(raw_info.get("year")),
        )

    envelope = ExtractionEnvelope(
        assignments=assignments,
        exams=exams,
        activities=activities + reclassified,
        course_info=course_info,
        confidence_score=_confidence(parsed.get("confidence_score")),
    )
    return ValidationOutcome(success=True, data=envelope, repaired=len(reclassified))
