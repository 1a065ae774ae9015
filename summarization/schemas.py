"""
Pydantic schemas for the summarization API.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from .config import SUMMARIZATION_DEFAULT_LANGUAGE


class TextSummarizationRequest(BaseModel):
    """Summarize already-extracted text."""
    request_id: Optional[str] = Field(None, description="Request ID (generated if not provided)")
    text: str = Field(..., description="Text to summarize", min_length=1)
    target_language: str = Field(SUMMARIZATION_DEFAULT_LANGUAGE, description="Language of the summary")
    user_id: Optional[str] = Field(None, description="User identifier for logging")


class ModelAttemptInfo(BaseModel):
    """One step of the model fallback chain."""
    model: str
    backend: str
    succeeded: bool
    error: Optional[str] = None


class SummarizationResponse(BaseModel):
    """Response from summarization."""
    request_id: str = Field(..., description="Unique request identifier")
    summary: str = Field(..., description="Generated summary")
    target_language: str = Field(..., description="Resolved target language")
    model: str = Field(..., description="Model that produced the summary")
    backend: str = Field(..., description="Surface used: sdk or rest")
    attempts: List[ModelAttemptInfo] = Field(default_factory=list, description="Fallback chain history")
    char_count: int = Field(..., description="Characters in the input text")
    user_id: Optional[str] = Field(None, description="User identifier if provided")
