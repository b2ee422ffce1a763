from .text_preprocessor import normalize_text, clean_text, is_likely_syllabus
from .prompt_builder import build_prompt
from .completion_client import CompletionClient, CompletionOutcome
from .response_validator import validate_response, is_valid_iso_date
from .event_normalizer import normalize_events, generate_event_id, map_priority, deduplicate_events
from .pattern_extractor import PatternExtractor
from .llm_extractor import LLMExtractor

__all__ = [
    "normalize_text", "clean_text", "is_likely_syllabus",
    "build_prompt",
    "CompletionClient", "CompletionOutcome",
    "validate_response", "is_valid_iso_date",
    "normalize_events", "generate_event_id", "map_priority", "deduplicate_events",
    "PatternExtractor", "LLMExtractor",
]
