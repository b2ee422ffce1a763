import asyncio
import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from syllabus_calendar.config import settings
from syllabus_calendar.models import CourseHint, ExtractionResult
from syllabus_calendar.services import ExtractionOrchestrator
from syllabus_calendar.utils import is_likely_syllabus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/parse", tags=["Parse"])


class ParseRequest(BaseModel):
    text: str
    course_name: Optional[str] = None
    course_code: Optional[str] = None
    semester: Optional[str] = None
    year: Optional[int] = None

    def hint(self) -> CourseHint:
        return CourseHint(
            name=self.course_name,
            code=self.course_code,
            semester=self.semester,
            year=self.year,
        )


@lru_cache
def get_orchestrator() -> ExtractionOrchestrator:
    return ExtractionOrchestrator.from_settings(settings)


async def _with_timeout(awaitable):
    # Timeouts belong to this layer; the pipeline itself never enforces one.
    try:
        return await asyncio.wait_for(awaitable, timeout=settings.REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Syllabus parsing timed out",
        )


def _require_text(request: ParseRequest) -> None:
    if not request.text or not request.text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Text content is required",
        )


def _single_engine_response(result: ExtractionResult, request: ParseRequest, label: str) -> dict:
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result.error or f"{label} parsing failed",
        )

    events = result.data.events if result.data else []
    return {
        "success": True,
        "data": result.data.model_dump(mode="json") if result.data else None,
        "message": f"Successfully parsed syllabus with {label} ({result.method}) - {len(events)} events found",
        "metadata": {
            "confidence": result.confidence,
            "method": result.method,
            "is_likely_syllabus": is_likely_syllabus(request.text),
        },
    }


@router.post("/llm", response_model=dict)
async def parse_with_llm(
    request: ParseRequest,
    orchestrator: ExtractionOrchestrator = Depends(get_orchestrator),
):
    """Parse syllabus text with the completion-service engine."""
    _require_text(request)
    result = await _with_timeout(orchestrator.extract(request.text, request.hint(), engine="llm"))
    response = _single_engine_response(result, request, "LLM")
    response["metadata"]["model"] = settings.LLM_MODEL
    return response


@router.post("/pattern", response_model=dict)
async def parse_with_patterns(
    request: ParseRequest,
    orchestrator: ExtractionOrchestrator = Depends(get_orchestrator),
):
    """Parse syllabus text with the rule-based engine."""
    _require_text(request)
    result = await _with_timeout(orchestrator.extract(request.text, request.hint(), engine="pattern"))
    return _single_engine_response(result, request, "patterns")


@router.post("/compare", response_model=dict)
async def compare_parsers(
    request: ParseRequest,
    orchestrator: ExtractionOrchestrator = Depends(get_orchestrator),
):
    """Run both engines side by side."""
    _require_text(request)
    comparison = await _with_timeout(orchestrator.compare(request.text, request.hint()))
    return {
        "success": True,
        "data": comparison.model_dump(mode="json", exclude={"llm": {"raw_response"}, "pattern": {"raw_response"}}),
        "message": "Comparison completed",
    }


@router.get("/status", response_model=dict)
async def parse_status(orchestrator: ExtractionOrchestrator = Depends(get_orchestrator)):
    """Report which engines can run."""
    return {
        "success": True,
        "data": orchestrator.get_status().model_dump(mode="json"),
        "message": "Parsing service status",
    }
