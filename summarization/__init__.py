"""
Summarization Module

Summarizes extracted document text in a caller-chosen language:
- One prompt, ordered candidate models, stop at first success
- "Model not found" moves to the next candidate; other failures abort
- Single direct REST fallback once every candidate is unavailable
"""

from .service import router, get_summarizer
from .summarizer import (
    SummarizationClient,
    SummaryRequest,
    SummaryResult,
    ModelAttempt
)
from .languages import resolve_language, SUPPORTED_LANGUAGES
from .prompts import get_summary_prompt
from .schemas import (
    TextSummarizationRequest,
    SummarizationResponse,
    ModelAttemptInfo
)

__all__ = [
    # Router
    "router",
    "get_summarizer",
    # Summarizer
    "SummarizationClient",
    "SummaryRequest",
    "SummaryResult",
    "ModelAttempt",
    # Language / prompt
    "resolve_language",
    "SUPPORTED_LANGUAGES",
    "get_summary_prompt",
    # Schemas
    "TextSummarizationRequest",
    "SummarizationResponse",
    "ModelAttemptInfo"
]
