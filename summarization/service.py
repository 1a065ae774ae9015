"""
FastAPI router for localized summarization endpoints.
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from core.errors import DocumentPipelineError
from core.validators import validate_text_length
from logs.logging_config import get_llm_logger, RequestContext
from .config import (
    SUMMARIZATION_CANDIDATE_MODELS,
    SUMMARIZATION_REST_MODEL,
    SUMMARIZATION_TEMPERATURE,
    SUMMARIZATION_MAX_INPUT_CHARS,
    SUMMARIZATION_DEFAULT_LANGUAGE,
)
from .languages import SUPPORTED_LANGUAGES, LANGUAGE_ALIASES, resolve_language
from .llm_client import get_client
from .schemas import (
    TextSummarizationRequest,
    SummarizationResponse,
    ModelAttemptInfo,
)
from .summarizer import SummarizationClient, SummaryRequest

logger = get_llm_logger()

router = APIRouter(prefix="/api/v1/summarize", tags=["Summarization"])


# =====================
# Summarizer Instance
# =====================

_summarizer: Optional[SummarizationClient] = None


def get_summarizer() -> SummarizationClient:
    """Get or create the process-wide summarizer."""
    global _summarizer
    if _summarizer is None:
        _summarizer = SummarizationClient(get_client())
    return _summarizer


# =====================
# API Endpoints
# =====================

@router.post("/text", response_model=SummarizationResponse)
async def summarize_text_endpoint(
    request: TextSummarizationRequest,
    summarizer: SummarizationClient = Depends(get_summarizer)
):
    """
    Summarize text in the requested language.

    **Request Body:**
    - `text`: Text to summarize
    - `target_language`: Language name or alias (e.g. "Spanish", "es")

    **Returns:**
    - `summary`: Generated summary
    - `model` / `backend`: Which model in the fallback chain answered
    """
    request_id = request.request_id or str(uuid.uuid4())

    with RequestContext(request_id, user_id=request.user_id):
        language = resolve_language(request.target_language)

        logger.info(
            f"[SUMMARIZE_TEXT] START | request_id={request_id} | chars={len(request.text)} | "
            f"language={language} | user_id={request.user_id}"
        )

        try:
            validate_text_length(request.text, SUMMARIZATION_MAX_INPUT_CHARS, "Summarization")
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        try:
            result = await summarizer.run(SummaryRequest(text=request.text, target_language=language))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except DocumentPipelineError as e:
            logger.error(f"[SUMMARIZE_TEXT] ERROR | request_id={request_id} | kind={e.kind} | error={e.message}")
            raise HTTPException(status_code=500, detail=e.to_dict())

        logger.info(f"[SUMMARIZE_TEXT] END | request_id={request_id} | model={result.model} | backend={result.backend}")

        return SummarizationResponse(
            request_id=request_id,
            summary=result.summary,
            target_language=language,
            model=result.model,
            backend=result.backend,
            attempts=[ModelAttemptInfo(**a.to_dict()) for a in result.attempts],
            char_count=len(request.text),
            user_id=request.user_id
        )


@router.get("/languages")
async def get_languages():
    """Supported target languages and accepted aliases."""
    return {
        "languages": SUPPORTED_LANGUAGES,
        "aliases": LANGUAGE_ALIASES,
        "default": SUMMARIZATION_DEFAULT_LANGUAGE,
        "note": "Unrecognized languages are passed to the model unchanged."
    }


@router.get("/config")
async def get_default_config():
    """Model fallback chain and generation settings."""
    return {
        "candidate_models": SUMMARIZATION_CANDIDATE_MODELS,
        "rest_fallback_model": SUMMARIZATION_REST_MODEL,
        "temperature": SUMMARIZATION_TEMPERATURE,
        "max_input_chars": SUMMARIZATION_MAX_INPUT_CHARS
    }
