"""
Runs one or both extraction engines and returns uniform results.

Engines are anything with ``async extract(text, hint) -> ExtractionResult``.
In comparison mode both run concurrently and each outcome is captured on its
own, so a failure in one engine never changes what is reported for the other.
"""
import asyncio
import logging
from typing import Any, Dict, Mapping, Optional, Protocol

from syllabus_calendar.config import Settings, settings as default_settings
from syllabus_calendar.models import (
    ComparisonResult,
    CourseHint,
    ErrorKind,
    ExtractionResult,
    ReconciliationSummary,
    ServiceStatus,
    StatusReport,
)
from syllabus_calendar.utils.completion_client import CompletionClient
from syllabus_calendar.utils.event_normalizer import deduplicate_events
from syllabus_calendar.utils.llm_extractor import LLMExtractor
from syllabus_calendar.utils.pattern_extractor import PatternExtractor

logger = logging.getLogger(__name__)

LLM_ENGINE = "llm"
PATTERN_ENGINE = "pattern"


class Extractor(Protocol):
    async def extract(self, text: str, hint: Optional[CourseHint] = None) -> ExtractionResult:
        ...


def reconcile(llm: ExtractionResult, pattern: ExtractionResult) -> ReconciliationSummary:
    """Compare both engines' events by id and merge them, LLM events first."""
    llm_events = llm.data.events if llm.success and llm.data else []
    pattern_events = pattern.data.events if pattern.success and pattern.data else []

    llm_ids = {event.id for event in llm_events}
    pattern_ids = {event.id for event in pattern_events}

    merged = deduplicate_events([*llm_events, *pattern_events])
    return ReconciliationSummary(
        shared_ids=sorted(llm_ids & pattern_ids),
        llm_only_ids=sorted(llm_ids - pattern_ids),
        pattern_only_ids=sorted(pattern_ids - llm_ids),
        merged_events=sorted(merged, key=lambda event: event.date),
    )


class ExtractionOrchestrator:
    def __init__(
        self,
        llm: Extractor,
        pattern: Extractor,
        config: Optional[Settings] = None,
        completion_client: Optional[CompletionClient] = None,
    ):
        self.engines: Dict[str, Extractor] = {LLM_ENGINE: llm, PATTERN_ENGINE: pattern}
        self.config = config or default_settings
        self.completion_client = completion_client

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "ExtractionOrchestrator":
        """Wire the default engines around one lazily-initialized completion client."""
        config = config or default_settings
        client = CompletionClient(config)
        return cls(
            llm=LLMExtractor(client, config),
            pattern=PatternExtractor(config.MAX_TEXT_LENGTH),
            config=config,
            completion_client=client,
        )

    async def _run_engine(
        self, name: str, text: str, hint: Optional[CourseHint]
    ) -> ExtractionResult:
        engine = self.engines.get(name)
        if engine is None:
            return ExtractionResult.failure(ErrorKind.INVALID_INPUT, f"Unknown extraction engine '{name}'")
        try:
            return await engine.extract(text, hint)
        except Exception as e:
            logger.exception("%s extraction raised", name)
            return ExtractionResult.failure(ErrorKind.INTERNAL, str(e) or type(e).__name__)

    async def extract(
        self, text: str, hint: Optional[CourseHint] = None, engine: str = LLM_ENGINE
    ) -> ExtractionResult:
        if not isinstance(text, str) or not text.strip():
            return ExtractionResult.failure(ErrorKind.INVALID_INPUT, "Text content is required")
        return await self._run_engine(engine, text, hint)

    @staticmethod
    def _settle(name: str, outcome: Any) -> ExtractionResult:
        if isinstance(outcome, ExtractionResult):
            if not outcome.success:
                logger.warning("%s engine failed during comparison: %s", name, outcome.error)
            return outcome
        if isinstance(outcome, BaseException):
            logger.warning("%s engine raised during comparison: %r", name, outcome)
            return ExtractionResult.failure(ErrorKind.INTERNAL, str(outcome) or type(outcome).__name__)
        return ExtractionResult.failure(ErrorKind.INTERNAL, f"{name} engine returned {type(outcome).__name__}")

    async def compare(self, text: str, hint: Optional[CourseHint] = None) -> ComparisonResult:
        """Run both engines concurrently and report both outcomes side by side."""
        if not isinstance(text, str) or not text.strip():
            failure = ExtractionResult.failure(ErrorKind.INVALID_INPUT, "Text content is required")
            return ComparisonResult(llm=failure, pattern=failure)

        llm_outcome, pattern_outcome = await asyncio.gather(
            self._run_engine(LLM_ENGINE, text, hint),
            self._run_engine(PATTERN_ENGINE, text, hint),
            return_exceptions=True,
        )
        llm = self._settle(LLM_ENGINE, llm_outcome)
        pattern = self._settle(PATTERN_ENGINE, pattern_outcome)
        return ComparisonResult(llm=llm, pattern=pattern, summary=reconcile(llm, pattern))

    def get_status(self) -> StatusReport:
        if self.completion_client is not None:
            llm_status = self.completion_client.get_status()
        else:
            llm_status = ServiceStatus(available=False, error="No completion client configured")
        return StatusReport(
            llm=llm_status,
            pattern=ServiceStatus(available=True),
            environment={
                "enable_llm": self.config.ENABLE_LLM_PARSING,
                "model": self.config.LLM_MODEL,
                "max_tokens": self.config.LLM_MAX_TOKENS,
                "temperature": self.config.LLM_TEMPERATURE,
            },
        )
