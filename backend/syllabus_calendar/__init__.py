"""Syllabus-to-calendar extraction core."""

__version__ = "1.0.0"
