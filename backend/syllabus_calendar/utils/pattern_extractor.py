"""
Deterministic, rule-based syllabus extraction.

Works line by line on normalized text: finds date candidates with a regex,
classifies each dated line with keyword tables and hands the resulting
envelope to the shared EventNormalizer, so results have exactly the same
shape (and ids) as the LLM path.
"""
import logging
import re
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from syllabus_calendar.models import (
    ActivityItem,
    AssignmentItem,
    CourseHint,
    CourseInfo,
    ErrorKind,
    ExamItem,
    ExtractionEnvelope,
    ExtractionResult,
    ParsedSyllabus,
)
from syllabus_calendar.utils.event_normalizer import normalize_events
from syllabus_calendar.utils.text_preprocessor import normalize_text

logger = logging.getLogger(__name__)

# Date regex for candidate extraction
DATE_REGEX = re.compile(
    r"\b("
    r"\d{1,2}/\d{1,2}(?:/\d{2,4})?"
    r"|"
    r"(?:January|February|March|April|May|June|July|August|September|October|November|December"
    r"|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)\.?\s+\d{1,2}(?:st|nd|rd|th)?(?:,?\s+\d{4})?"
    r")\b",
    re.IGNORECASE,
)

NUMERIC_DATE_REGEX = re.compile(r"^(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?$")
MONTH_DATE_REGEX = re.compile(
    r"^([A-Za-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?(?:,?\s+(\d{4}))?$", re.IGNORECASE
)
SEMESTER_REGEX = re.compile(r"\b(Spring|Summer|Fall|Autumn|Winter)\s+(\d{4})\b", re.IGNORECASE)
YEAR_REGEX = re.compile(r"\b(20\d{2})\b")
COURSE_CODE_REGEX = re.compile(r"\b([A-Z]{2,5})[ -]?(\d{3,4}[A-Z]?)\b")
TIME_REGEX = re.compile(r"\b(\d{1,2}(?::\d{2})?\s*[AaPp]\.?[Mm]\.?)")
TRAILING_CONNECTOR_REGEX = re.compile(r"[\s\-–•*:;,(]*\b(?:due|on|by)?[\s\-–:;,(]*$", re.IGNORECASE)

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

# Classification tables, checked in this order
EXAM_KEYWORDS = ["exam", "examination", "midterm", "quiz", "test"]
ASSIGNMENT_KEYWORDS = [
    "assignment", "due", "paper", "essay", "project", "homework",
    "problem set", "submit", "submission", "presentation", "memo", "brief",
]
FINAL_KEYWORDS = ["final"]
READING_KEYWORDS = ["read", "reading", "chapter", "pages"]

HIGH_PRIORITY_KEYWORDS = ["final", "midterm"]


def _contains_any(text: str, keywords: List[str]) -> bool:
    """Whole-word match, allowing a plural ending ("exams", "quizzes")."""
    return any(re.search(rf"\b{re.escape(k)}(?:s|zes|es)?\b", text) for k in keywords)


def is_valid_date_token(token: str) -> bool:
    """Validate if a date token is reasonable."""
    token = token.strip()
    if "\n" in token:
        return False

    # Numeric formats, month first
    m_num = NUMERIC_DATE_REGEX.match(token)
    if m_num:
        month, day = int(m_num.group(1)), int(m_num.group(2))
        return 1 <= month <= 12 and 1 <= day <= 31

    # Month name formats
    m_name = MONTH_DATE_REGEX.match(token)
    if m_name:
        return m_name.group(1).lower()[:3] in MONTHS and 1 <= int(m_name.group(2)) <= 31

    return False


def extract_date_candidates(indexed_lines: List[Dict]) -> List[Dict]:
    """Find all valid date tokens with their line index."""
    candidates: List[Dict] = []
    for line in indexed_lines:
        for m in DATE_REGEX.finditer(line["text"]):
            token = m.group(0).strip()
            if is_valid_date_token(token):
                candidates.append({
                    "date_string": token,
                    "line_index": line["index"],
                    "start": m.start(),
                    "end": m.end(),
                })
    return candidates


def resolve_date(token: str, default_year: int) -> Optional[date]:
    """Turn a date token into a calendar date, or None if no such day exists."""
    token = token.strip()
    try:
        m_num = NUMERIC_DATE_REGEX.match(token)
        if m_num:
            year = default_year
            if m_num.group(3):
                year = int(m_num.group(3))
                if year < 100:
                    year += 2000
            return date(year, int(m_num.group(1)), int(m_num.group(2)))

        m_name = MONTH_DATE_REGEX.match(token)
        if m_name:
            month = MONTHS.get(m_name.group(1).lower()[:3])
            if month is None:
                return None
            year = int(m_name.group(3)) if m_name.group(3) else default_year
            return date(year, month, int(m_name.group(2)))
    except ValueError:
        return None
    return None


def extract_semester_info(text: str) -> Optional[str]:
    """Look for patterns like "Spring 2024", "Fall 2023"."""
    match = SEMESTER_REGEX.search(text)
    if match:
        return match.group(1).title()
    return None


def detect_year(text: str) -> Optional[int]:
    match = SEMESTER_REGEX.search(text) or YEAR_REGEX.search(text)
    if match:
        return int(match.group(match.lastindex))
    return None


def detect_course_code(text: str) -> Optional[str]:
    match = COURSE_CODE_REGEX.search(text)
    if match:
        return f"{match.group(1)} {match.group(2)}"
    return None


def item_title(line: str, start: int, end: int) -> str:
    """The line without its date token and the connector words around it."""
    before = TRAILING_CONNECTOR_REGEX.sub("", line[:start])
    after = line[end:].strip(" -–•*:;,.)")
    title = f"{before} {after}" if before and after else (before or after)
    title = re.sub(r"^[\s\-–•*:;,.]+", "", title)
    title = re.sub(r"\s{2,}", " ", title).strip()
    return title or line.strip()


class PatternExtractor:
    """Rule-based engine with the same result contract as the LLM engine."""

    def __init__(self, max_text_length: Optional[int] = None):
        self.max_text_length = max_text_length

    def build_envelope(self, cleaned: str, year: int) -> ExtractionEnvelope:
        lines = cleaned.split("\n")
        indexed_lines = [{"index": i, "text": line} for i, line in enumerate(lines)]
        # First candidate per line that names a real day
        dated: Dict[int, Tuple[Dict, date]] = {}
        for candidate in extract_date_candidates(indexed_lines):
            if candidate["line_index"] in dated:
                continue
            resolved = resolve_date(candidate["date_string"], year)
            if resolved is not None:
                dated[candidate["line_index"]] = (candidate, resolved)

        assignments: List[AssignmentItem] = []
        exams: List[ExamItem] = []
        activities: List[ActivityItem] = []

        for line in indexed_lines:
            text = line["text"]
            lower = text.lower()
            candidate, resolved = dated.get(line["index"], (None, None))

            if resolved is None:
                if text and _contains_any(lower, READING_KEYWORDS):
                    activities.append(ActivityItem(title=text, type="reading"))
                continue

            title = item_title(text, candidate["start"], candidate["end"])
            iso_date = resolved.isoformat()
            priority = "high" if _contains_any(lower, HIGH_PRIORITY_KEYWORDS) else None

            is_exam = _contains_any(lower, EXAM_KEYWORDS)
            is_assignment = not is_exam and _contains_any(lower, ASSIGNMENT_KEYWORDS)
            if is_exam or (not is_assignment and _contains_any(lower, FINAL_KEYWORDS)):
                time_match = TIME_REGEX.search(text)
                exams.append(ExamItem(
                    title=title,
                    date=iso_date,
                    time=time_match.group(1) if time_match else None,
                    details=text,
                    priority=priority or "high",
                ))
            elif is_assignment:
                assignments.append(AssignmentItem(
                    title=title,
                    due_date=iso_date,
                    details=text,
                    priority=priority,
                ))
            elif _contains_any(lower, READING_KEYWORDS):
                # Readings stay undated like the LLM path; keep the date visible
                activities.append(ActivityItem(
                    title=title,
                    details=f"{text} (Date: {iso_date})",
                    type="reading",
                ))

        return ExtractionEnvelope(assignments=assignments, exams=exams, activities=activities)

    def parse(
        self,
        text: str,
        course_name: Optional[str] = None,
        course_code: Optional[str] = None,
        semester: Optional[str] = None,
        year: Optional[int] = None,
    ) -> ExtractionResult:
        try:
            if self.max_text_length:
                cleaned = normalize_text(text, self.max_text_length)
            else:
                cleaned = normalize_text(text)
            if not cleaned:
                return ExtractionResult.failure(ErrorKind.INVALID_INPUT, "Text content is required")

            detected_year = detect_year(cleaned)
            target_year = year or detected_year or datetime.now().year
            events = normalize_events(self.build_envelope(cleaned, target_year))
            if not events:
                return ExtractionResult.failure(ErrorKind.NO_EVENTS, "No dated items found in syllabus")

            dated = sum(1 for event in events if not event.is_undated)
            confidence = min(90, 40 + 5 * dated + 2 * (len(events) - dated))

            info = CourseInfo(
                course_code=detect_course_code(cleaned),
                semester=extract_semester_info(cleaned),
            )
            syllabus = ParsedSyllabus(
                course_name=course_name or "Unknown Course",
                course_code=course_code or info.course_code or "UNKNOWN",
                semester=semester or info.semester or "Unknown",
                year=target_year,
                events=events,
                raw_text=text,
            )
            return ExtractionResult(success=True, data=syllabus, confidence=confidence, method="pattern")
        except Exception as e:
            logger.exception("Pattern extraction failed")
            return ExtractionResult.failure(ErrorKind.INTERNAL, str(e))

    async def extract(self, text: str, hint: Optional[CourseHint] = None) -> ExtractionResult:
        hint = hint or CourseHint()
        return self.parse(text, hint.name, hint.code, hint.semester, hint.year)
