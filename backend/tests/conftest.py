"""
Shared fixtures: an OpenAI-shaped fake client with call counting, settings
that never read the developer's .env, and a small sample syllabus.
"""
import json
from types import SimpleNamespace

import pytest

from syllabus_calendar.config import Settings
from syllabus_calendar.utils.completion_client import CompletionClient


SAMPLE_SYLLABUS = """
CS 101: Introduction to Programming
Spring 2025 Syllabus

Course Schedule and Assignments:
Week 1: Read Chapter 1, pages 1-20
Assignment 1: Hello World - Due January 20, 2025
Quiz 1: Basic Syntax - February 5, 2025
Midterm Exam - February 24, 2025
Final Project Submission - Due April 27, 2025

Grading:
Assignments: 40%

Office Hours:
Monday and Wednesday: 2:00 PM - 4:00 PM
"""

LLM_ENVELOPE = {
    "assignments": [
        {"title": "Brief Due", "due_date": "2025-03-14", "details": "Appellate brief", "priority": "HIGH"},
    ],
    "exams": [
        {"title": "Midterm Exam", "date": "TBD", "priority": "high"},
        {"title": "Final Exam", "date": "2025-05-02", "time": "9:00 AM"},
    ],
    "activities": [
        {"title": "Office Hours: Mondays 2–4pm", "type": "other"},
        {"title": "Read Hawkins v. McGee, pages 38-54", "type": "reading"},
    ],
    "course_info": {"course_name": "Contracts", "course_code": "LAW 501", "semester": "Spring", "year": 2025},
    "confidence_score": 92,
}


def completion_payload(content):
    """Wrap message content the way chat.completions responses arrive."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return completion_payload(self.content)


class FakeOpenAI:
    def __init__(self, completions):
        self.chat = SimpleNamespace(completions=completions)


def make_settings(**overrides):
    values = {
        "OPENAI_API_KEY": "sk-test-key",
        "ENABLE_LLM_PARSING": True,
        "LLM_MODEL": "gpt-test-model",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_client(config, completions, factory_calls=None):
    def factory(api_key, cfg):
        if factory_calls is not None:
            factory_calls.append(api_key)
        return FakeOpenAI(completions)

    return CompletionClient(config, client_factory=factory)


@pytest.fixture
def sample_syllabus():
    return SAMPLE_SYLLABUS


@pytest.fixture
def llm_envelope():
    return json.loads(json.dumps(LLM_ENVELOPE))


@pytest.fixture
def settings_on():
    return make_settings()
