"""
Text normalization applied before any extractor sees a document.

normalize_text() is pure: no I/O and no failure mode. Its output is a fixed
point of the cleanup steps, so normalize_text(normalize_text(x)) == normalize_text(x).
"""
import re

MAX_TEXT_LENGTH = 8000

# NUL and other C0 controls except tab, newline and carriage return
CONTROL_CHARS_REGEX = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
PAGE_HEADER_REGEX = re.compile(r"Page \d+ of \d+", re.IGNORECASE)
PAGE_NUMBER_LINE_REGEX = re.compile(r"^[ \t]*\d+[ \t]*$", re.MULTILINE)
HORIZONTAL_WS_REGEX = re.compile(r"[^\S\n]+")
BLANK_RUN_REGEX = re.compile(r"\n{3,}")

SYLLABUS_KEYWORDS = [
    "syllabus",
    "course description",
    "assignments",
    "due date",
    "deadline",
    "exam",
    "midterm",
    "final",
    "reading",
    "schedule",
    "calendar",
    "grading",
    "rubric",
    "course outline",
    "learning objectives",
]


def clean_text(text: str) -> str:
    """Normalize line endings and drop control characters."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return CONTROL_CHARS_REGEX.sub("", text)


def _cleanup_pass(text: str, max_length: int) -> str:
    text = clean_text(text)
    text = PAGE_HEADER_REGEX.sub("", text)
    text = PAGE_NUMBER_LINE_REGEX.sub("", text)
    lines = [HORIZONTAL_WS_REGEX.sub(" ", line).strip() for line in text.split("\n")]
    text = "\n".join(lines)
    text = BLANK_RUN_REGEX.sub("\n\n", text)
    return text[:max_length].strip()


def normalize_text(text: str, max_length: int = MAX_TEXT_LENGTH) -> str:
    """
    Clean raw extracted text into a bounded string for the extractors.

    Collapses whitespace runs inside each line, strips standalone page-number
    lines and "Page N of M" headers, normalizes line endings, squeezes 3+
    blank lines into one and truncates to ``max_length`` characters.
    """
    if not isinstance(text, str):
        return ""

    current = _cleanup_pass(text, max_length)
    # Truncation can expose a new page-number line at the end; every pass only
    # shrinks the text, so this terminates.
    while True:
        again = _cleanup_pass(current, max_length)
        if again == current:
            return current
        current = again


def is_likely_syllabus(text: str, min_matches: int = 3) -> bool:
    """Check if text is likely a syllabus based on keyword hits."""
    lower_text = (text or "").lower()
    keyword_matches = sum(1 for keyword in SYLLABUS_KEYWORDS if keyword in lower_text)
    return keyword_matches >= min_matches
