"""
Core Module

Shared infrastructure components for all modules:
- Gemini client base class
- Pipeline error kinds
- Validators
"""

from .errors import (
    DocumentPipelineError,
    ParseError,
    UploadFailedError,
    NoJobIdError,
    JobFailedError,
    ParseTimeoutError,
    ExtractionFailedError,
    TransientParseError,
    SummarizationError,
    AllModelsFailedError,
    UpstreamError,
)
from .llm_client_base import (
    BaseLLMClient,
    LLMConfig,
    BACKEND_SDK,
    BACKEND_REST,
    is_model_unavailable,
    extract_rest_text,
)
from .validators import (
    validate_file_size,
    validate_text_length,
    validate_required_field,
)

__all__ = [
    "DocumentPipelineError",
    "ParseError",
    "UploadFailedError",
    "NoJobIdError",
    "JobFailedError",
    "ParseTimeoutError",
    "ExtractionFailedError",
    "TransientParseError",
    "SummarizationError",
    "AllModelsFailedError",
    "UpstreamError",
    "BaseLLMClient",
    "LLMConfig",
    "BACKEND_SDK",
    "BACKEND_REST",
    "is_model_unavailable",
    "extract_rest_text",
    "validate_file_size",
    "validate_text_length",
    "validate_required_field",
]
