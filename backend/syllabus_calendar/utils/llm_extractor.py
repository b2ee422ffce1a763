"""
Completion-service extraction engine.

Stages run strictly in order: preprocess -> build prompt -> call -> validate
-> normalize. Every failure is returned as an ExtractionResult; nothing raised
inside the pipeline reaches the caller.
"""
import logging
from datetime import datetime
from typing import Optional

from syllabus_calendar.config import Settings, settings as default_settings
from syllabus_calendar.models import (
    CourseHint,
    ErrorKind,
    ExtractionResult,
    ParsedSyllabus,
)
from syllabus_calendar.utils.completion_client import CompletionClient
from syllabus_calendar.utils.event_normalizer import normalize_events
from syllabus_calendar.utils.prompt_builder import build_prompt
from syllabus_calendar.utils.response_validator import validate_response
from syllabus_calendar.utils.text_preprocessor import normalize_text

logger = logging.getLogger(__name__)

DEFAULT_LLM_CONFIDENCE = 85


class LLMExtractor:
    def __init__(self, client: CompletionClient, config: Optional[Settings] = None):
        self.client = client
        self.config = config or client.config or default_settings

    async def extract(self, text: str, hint: Optional[CourseHint] = None) -> ExtractionResult:
        # Feature flag is checked before the client is ever touched
        if not self.config.ENABLE_LLM_PARSING:
            return ExtractionResult.failure(ErrorKind.DISABLED)

        status = self.client.get_status()
        if not status.available:
            return ExtractionResult.failure(
                ErrorKind.UNAVAILABLE, status.error or "OpenAI client not available"
            )

        hint = hint or CourseHint()
        try:
            cleaned = normalize_text(text, self.config.MAX_TEXT_LENGTH)
            if not cleaned:
                return ExtractionResult.failure(ErrorKind.INVALID_INPUT, "Text content is required")

            prompt = build_prompt(cleaned, hint)
            outcome = await self.client.complete(prompt)
            if not outcome.success:
                return ExtractionResult.failure(outcome.error_kind or ErrorKind.TRANSIENT, outcome.error)

            validation = validate_response(outcome.payload)
            if not validation.success:
                return ExtractionResult.failure(
                    ErrorKind.MALFORMED_RESPONSE,
                    validation.error,
                    raw_response=outcome.payload,
                    code=validation.code,
                )
            if validation.repaired:
                logger.info(
                    "partial-repair: %d item(s) with unusable dates kept as undated activities",
                    validation.repaired,
                )

            envelope = validation.data
            events = normalize_events(envelope)
            info = envelope.course_info
            syllabus = ParsedSyllabus(
                course_name=(info and info.course_name) or hint.name or "Unknown Course",
                course_code=(info and info.course_code) or hint.code or "UNKNOWN",
                semester=(info and info.semester) or hint.semester or "Unknown",
                year=(info and info.year) or hint.year or datetime.now().year,
                events=events,
                raw_text=text,
            )
            confidence = envelope.confidence_score
            if confidence is None:
                confidence = DEFAULT_LLM_CONFIDENCE

            return ExtractionResult(
                success=True,
                data=syllabus,
                confidence=confidence,
                method="llm",
                raw_response=outcome.payload,
            )
        except Exception as e:
            logger.exception("LLM parsing error")
            return ExtractionResult.failure(ErrorKind.INTERNAL, str(e) or type(e).__name__)
