"""
Text normalization before extraction.

Covers page-number stripping, whitespace handling, truncation, idempotence and
the syllabus keyword check.
"""
import pytest

from syllabus_calendar.utils.text_preprocessor import (
    clean_text,
    is_likely_syllabus,
    normalize_text,
)


def test_strips_page_numbers_and_headers():
    text = "Week 1: Read pages 1-20\n12\nPage 3 of 10\nWeek 2: Quiz"
    assert normalize_text(text) == "Week 1: Read pages 1-20\n\nWeek 2: Quiz"


def test_collapses_whitespace_runs_inside_lines():
    assert normalize_text("Midterm   Exam\t\t March 3") == "Midterm Exam March 3"


def test_normalizes_line_endings():
    assert normalize_text("Line one\r\nLine two\rLine three") == "Line one\nLine two\nLine three"


def test_collapses_three_or_more_blank_lines():
    assert normalize_text("Top\n\n\n\n\nBottom") == "Top\n\nBottom"


def test_truncates_to_max_length():
    out = normalize_text("a" * 50, max_length=10)
    assert out == "a" * 10


def test_default_limit_is_8000_characters():
    assert len(normalize_text("word " * 5000)) <= 8000


def test_removes_control_characters():
    assert clean_text("Exam\x00 date\x07") == "Exam date"


def test_non_string_input_yields_empty_string():
    assert normalize_text(None) == ""


@pytest.mark.parametrize("text", [
    "",
    "   \n\n  ",
    "Week 1\n\n\n\n3\nPage 1 of 2\nRead:   Chapter 2",
    "Assignment due 3/14\r\n\r\n\r\n\r\nPage 2 of 9 Exam",
    "x" * 7998 + " 12345",
    " 12 \nbody",
    "12 Page 1 of 3\nnext",
])
def test_normalize_is_idempotent(text):
    once = normalize_text(text)
    assert normalize_text(once) == once


def test_truncation_exposing_a_number_line_is_still_idempotent():
    text = "header\n" + "4" * 20 + "abc"
    once = normalize_text(text, max_length=12)
    assert normalize_text(once, max_length=12) == once
    assert once == "header"


def test_is_likely_syllabus(sample_syllabus):
    assert is_likely_syllabus(sample_syllabus)
    assert not is_likely_syllabus("Grocery list: eggs, milk, bread")
