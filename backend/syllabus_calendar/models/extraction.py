"""
Intermediate and result types for the extraction pipeline.

RawExtractionItem variants (AssignmentItem, ExamItem, ActivityItem) and the
ExtractionEnvelope describe what an extractor produced before normalization.
ExtractionResult is the uniform envelope every engine returns to its caller.
"""
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .event import CalendarEvent, ParsedSyllabus


class ErrorKind(str, Enum):
    DISABLED = "disabled"
    UNAVAILABLE = "unavailable"
    TRANSIENT = "transient"
    MALFORMED_RESPONSE = "malformed-response"
    INVALID_INPUT = "invalid-input"
    NO_EVENTS = "no-events"
    INTERNAL = "internal"


ExtractionMethod = Literal["llm", "pattern", "fallback"]


class CourseHint(BaseModel):
    """Course metadata the caller already knows."""

    name: Optional[str] = None
    code: Optional[str] = None
    semester: Optional[str] = None
    year: Optional[int] = None

    def is_empty(self) -> bool:
        return not any((self.name, self.code, self.semester, self.year))


class CourseInfo(BaseModel):
    course_name: Optional[str] = None
    course_code: Optional[str] = None
    semester: Optional[str] = None
    year: Optional[int] = None


class AssignmentItem(BaseModel):
    title: str
    due_date: Optional[str] = None
    details: Optional[str] = None
    priority: Optional[str] = None


class ExamItem(BaseModel):
    title: str
    date: Optional[str] = None
    time: Optional[str] = None
    details: Optional[str] = None
    priority: Optional[str] = None


class ActivityItem(BaseModel):
    """An item the extractor could not anchor to a calendar date."""

    title: str
    details: Optional[str] = None
    type: str = "other"
    priority: Optional[str] = None


class ExtractionEnvelope(BaseModel):
    assignments: List[AssignmentItem] = Field(default_factory=list)
    exams: List[ExamItem] = Field(default_factory=list)
    activities: List[ActivityItem] = Field(default_factory=list)
    course_info: Optional[CourseInfo] = None
    confidence_score: Optional[float] = None


class ExtractionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    data: Optional[ParsedSyllabus] = None
    confidence: float = Field(default=0, ge=0, le=100)
    method: ExtractionMethod = "fallback"
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    raw_response: Optional[Any] = None

    @model_validator(mode="after")
    def _failures_are_fallbacks(self) -> "ExtractionResult":
        if not self.success and (self.confidence != 0 or self.method != "fallback"):
            raise ValueError("failed results must have confidence 0 and method 'fallback'")
        return self

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        detail: Optional[str] = None,
        raw_response: Any = None,
        code: Optional[str] = None,
    ) -> "ExtractionResult":
        """Build the fallback envelope for a failed run.

        ``code`` overrides the label in the error string (validator codes such as
        ``malformed-json`` are more specific than their error kind).
        """
        label = code or kind.value
        error = f"{label}: {detail}" if detail else label
        return cls(
            success=False,
            confidence=0,
            method="fallback",
            error=error,
            error_kind=kind,
            raw_response=raw_response,
        )


class ReconciliationSummary(BaseModel):
    shared_ids: List[str] = Field(default_factory=list)
    llm_only_ids: List[str] = Field(default_factory=list)
    pattern_only_ids: List[str] = Field(default_factory=list)
    merged_events: List[CalendarEvent] = Field(default_factory=list)


class ComparisonResult(BaseModel):
    """Both engines' outcomes side by side."""

    model_config = ConfigDict(frozen=True)

    llm: ExtractionResult
    pattern: ExtractionResult
    summary: ReconciliationSummary = Field(default_factory=ReconciliationSummary)


class ServiceStatus(BaseModel):
    available: bool
    model: Optional[str] = None
    error: Optional[str] = None


class StatusReport(BaseModel):
    llm: ServiceStatus
    pattern: ServiceStatus
    environment: Dict[str, Any] = Field(default_factory=dict)
