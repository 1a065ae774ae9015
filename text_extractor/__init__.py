"""
Text Extractor Module

Turns uploaded documents into plain text.
- Plain-text uploads are read directly
- Everything else goes through the remote parser (submit, poll, resolve)
- Tolerates parser responses whose shape varies between versions
"""

from .schemas import (
    JobStatus,
    ExtractionSource,
    ParseJob,
    ResolvedField,
    ExtractionResult
)
from .parser_client import ParserConfig, LlamaParseClient, ParserHTTPError
from .resolver import resolve_field, find_long_string, extract_unstructured
from .orchestrator import ParseOrchestrator, is_plain_text, read_text_file
from .service import router, get_orchestrator, close_orchestrator

__all__ = [
    "JobStatus",
    "ExtractionSource",
    "ParseJob",
    "ResolvedField",
    "ExtractionResult",
    "ParserConfig",
    "LlamaParseClient",
    "ParserHTTPError",
    "resolve_field",
    "find_long_string",
    "extract_unstructured",
    "ParseOrchestrator",
    "is_plain_text",
    "read_text_file",
    "router",
    "get_orchestrator",
    "close_orchestrator"
]
