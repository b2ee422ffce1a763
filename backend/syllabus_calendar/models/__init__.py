from .event import CalendarEvent, EventType, ParsedSyllabus, Priority, UNDATED_SENTINEL
from .extraction import (
    ActivityItem,
    AssignmentItem,
    ComparisonResult,
    CourseHint,
    CourseInfo,
    ErrorKind,
    ExamItem,
    ExtractionEnvelope,
    ExtractionResult,
    ReconciliationSummary,
    ServiceStatus,
    StatusReport,
)

__all__ = [
    "CalendarEvent", "EventType", "ParsedSyllabus", "Priority", "UNDATED_SENTINEL",
    "ActivityItem", "AssignmentItem", "ComparisonResult", "CourseHint", "CourseInfo",
    "ErrorKind", "ExamItem", "ExtractionEnvelope", "ExtractionResult",
    "ReconciliationSummary", "ServiceStatus", "StatusReport",
]
