"""
Instruction payload for the completion-service extractor.

build_prompt() is deterministic and never calls out: identical text and
course hint always give an identical prompt.
"""
import json
from typing import Optional

from syllabus_calendar.models import CourseHint

SYSTEM_PROMPT = (
    "You are an expert at reading university syllabi and turning them into structured "
    "calendar data. Always return valid JSON."
)

EXTRACTION_POLICY = (
    "YOUR GOAL:\n"
    "Extract ONLY specific, dated academic work items from the syllabus: assignments, "
    "readings with page ranges or chapters, case citations assigned for a class, and exam dates.\n\n"
    "MUST IGNORE (administrative / general content):\n"
    "- Course descriptions, objectives and learning outcomes\n"
    "- Policies (attendance, absence, late work, honor code, grading policy)\n"
    "- Contact information, email addresses and office hours\n"
    "- Class meeting times, rooms and course platform instructions (Blackboard, Canvas, TWEN)\n"
    "- Generic textbook references and statements such as \"one chapter per week\"\n\n"
    "RULES:\n"
    "1. Capture each item exactly as written. Do not generalize or summarize.\n"
    "2. Look for schedule patterns: \"Week 1:\", \"January 17:\", \"Read:\", \"Assignment:\", "
    "\"Due:\", \"Pages 38-54\", \"Hawkins v. McGee\".\n"
    "3. Use ISO dates (YYYY-MM-DD) only when the text gives a specific calendar date.\n"
    "4. Items whose date is missing, relative (\"Week 3\") or ambiguous belong in \"activities\" "
    "without a date. Never invent dates and never use placeholders such as XX, TBD or TBA.\n"
    "5. Weekly schedules take precedence over general course material lists."
)

POSITIVE_EXAMPLES = [
    ("Week 1 January 17 - Read: The Handbook for the New Legal Writer, Chapters 25-28, pages 181-206",
     "activity (type \"reading\"): \"Week 1: The Handbook for the New Legal Writer, Chapters 25-28, pages 181-206\""),
    ("Week 1 Readings: M: Hawkins v. McGee & Home Building v. Blaisdell W: Door Dash, Inc. v. City of New York; Pages 38-54",
     "two readings: \"Week 1 Monday: Hawkins v. McGee & Home Building v. Blaisdell\" and "
     "\"Week 1 Wednesday: Door Dash, Inc. v. City of New York; Pages 38-54\""),
    ("Memo Assignment Due: February 14, 2025",
     "assignment: {\"title\": \"Memo Assignment\", \"due_date\": \"2025-02-14\"}"),
    ("Midterm Exam: March 15, 2025 at 9:00 AM",
     "exam: {\"title\": \"Midterm Exam\", \"date\": \"2025-03-15\", \"time\": \"9:00 AM\"}"),
]

NEGATIVE_EXAMPLES = [
    "Required textbook: Situations and Contracts",
    "Course objectives: To learn the fundamentals of contract law",
    "Contact: professor@university.edu",
    "Office Hours: Mondays 2-4pm, Room 210",
    "Attendance policy: Students must attend every class",
    "We will cover approximately one chapter per week",
]

OUTPUT_SCHEMA = {
    "assignments": [
        {
            "title": "Assignment title",
            "due_date": "YYYY-MM-DD",
            "details": "Optional description",
            "priority": "low|medium|high|urgent",
        }
    ],
    "exams": [
        {
            "title": "Exam title",
            "date": "YYYY-MM-DD",
            "time": "Optional time",
            "details": "Optional description",
            "priority": "low|medium|high|urgent",
        }
    ],
    "activities": [
        {
            "title": "Reading or other undated item",
            "details": "Optional description",
            "type": "reading|other",
            "priority": "low|medium|high|urgent",
        }
    ],
    "course_info": {
        "course_name": "Extracted course name",
        "course_code": "Extracted course code",
        "semester": "Extracted semester",
        "year": 2025,
    },
    "confidence_score": 85,
}


def format_course_hint(hint: Optional[CourseHint]) -> str:
    """Render the known course metadata as one context line, or "" if none."""
    if hint is None or hint.is_empty():
        return ""
    parts = []
    if hint.name:
        parts.append(hint.name)
    if hint.code:
        parts.append(f"({hint.code})" if hint.name else hint.code)
    line = " ".join(parts)
    term = " ".join(str(p) for p in (hint.semester, hint.year) if p)
    if term:
        line = f"{line} - {term}" if line else term
    return f"Course: {line}"


def build_prompt(text: str, hint: Optional[CourseHint] = None) -> str:
    """Assemble policy, examples, schema and course context around the syllabus text."""
    sections = [
        "Analyze the following syllabus text and extract its specific assignments, readings and exams.",
        EXTRACTION_POLICY,
    ]

    example_lines = ["WHAT TO EXTRACT:"]
    for source, extracted in POSITIVE_EXAMPLES:
        example_lines.append(f"- \"{source}\" -> {extracted}")
    example_lines.append("")
    example_lines.append("WHAT TO IGNORE:")
    for source in NEGATIVE_EXAMPLES:
        example_lines.append(f"- \"{source}\"")
    sections.append("\n".join(example_lines))

    course_line = format_course_hint(hint)
    if course_line:
        sections.append(course_line)

    sections.append(f"Syllabus Text:\n{text}")
    sections.append(
        "Return a JSON object with exactly this structure. The \"assignments\", \"exams\" and "
        "\"activities\" arrays are required (use [] when empty); all dates use YYYY-MM-DD:\n"
        + json.dumps(OUTPUT_SCHEMA, indent=2)
    )
    sections.append("Return valid JSON only, no additional text.\n\nJSON Response:")
    return "\n\n".join(sections)
