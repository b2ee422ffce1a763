"""
Thin wrapper around the OpenAI chat completions API.

The AsyncOpenAI handle is created lazily on first use and then reused. It is
write-once: nothing replaces it after it has been built, so concurrent calls
always share the same configuration. Failures come back as CompletionOutcome
values instead of exceptions.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import openai
from openai import AsyncOpenAI

from syllabus_calendar.config import Settings, settings as default_settings
from syllabus_calendar.models import ErrorKind, ServiceStatus
from syllabus_calendar.utils.prompt_builder import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionOutcome:
    success: bool
    payload: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


def _default_client_factory(api_key: str, config: Settings) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key, timeout=config.LLM_TIMEOUT_SECONDS)


def _to_payload(response: Any) -> Dict[str, Any]:
    if isinstance(response, dict):
        return response
    if hasattr(response, "model_dump"):
        return response.model_dump()
    raise TypeError(f"unexpected completion response type: {type(response).__name__}")


class CompletionClient:
    def __init__(
        self,
        config: Optional[Settings] = None,
        client_factory: Optional[Callable[[str, Settings], Any]] = None,
    ):
        self.config = config or default_settings
        self._client_factory = client_factory or _default_client_factory
        self._client: Any = None
        self._init_error: Optional[str] = None

    def _ensure_client(self) -> Any:
        """Initialize-if-absent. Returns the shared handle or None when unavailable."""
        if self._client is not None:
            return self._client

        if not self.config.openai_key_configured:
            self._init_error = "OpenAI API key not configured or invalid"
            logger.warning("OpenAI API key not found. LLM parsing will be unavailable.")
            return None

        try:
            client = self._client_factory(self.config.OPENAI_API_KEY, self.config)
        except Exception as e:
            self._init_error = f"Failed to initialize OpenAI client: {e}"
            logger.error(self._init_error)
            return None

        if self._client is None:
            self._client = client
            self._init_error = None
        return self._client

    def is_available(self) -> bool:
        return self._ensure_client() is not None

    def get_status(self) -> ServiceStatus:
        """Report availability using the same check that guards every call."""
        if self._ensure_client() is None:
            return ServiceStatus(available=False, error=self._init_error)
        return ServiceStatus(available=True, model=self.config.LLM_MODEL)

    def build_request(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.config.LLM_MODEL,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.config.LLM_MAX_TOKENS,
            "temperature": self.config.LLM_TEMPERATURE,
            "response_format": {"type": "json_object"},
        }

    async def complete(self, prompt: str) -> CompletionOutcome:
        client = self._ensure_client()
        if client is None:
            return CompletionOutcome(
                success=False,
                error=self._init_error or "OpenAI client not available",
                error_kind=ErrorKind.UNAVAILABLE,
            )

        try:
            response = await client.chat.completions.create(**self.build_request(prompt))
            payload = _to_payload(response)
        except (openai.OpenAIError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Completion call failed: %s", e)
            return CompletionOutcome(
                success=False,
                error=str(e) or type(e).__name__,
                error_kind=ErrorKind.TRANSIENT,
            )

        return CompletionOutcome(success=True, payload=payload)
