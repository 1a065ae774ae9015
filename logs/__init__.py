"""
Logs Module

Provides:
- Console + rotating-file logging for the parse and summarize stages
- LLM call records and JSON-line metrics
- Per-request context (request_id, user_id) on every log line
"""

from .logging_config import (
    setup_llm_logging,
    get_llm_logger,
    get_metrics_logger,
    log_llm_request,
    log_llm_response,
    log_metrics,
    preview,
    preview_payload,
    RequestContext,
    get_user_id,
    get_request_id,
    generate_request_id,
    LOG_DIR,
    LLMRequestLog,
    LLMResponseLog,
    LLMMetrics
)

__all__ = [
    "setup_llm_logging",
    "get_llm_logger",
    "get_metrics_logger",
    "log_llm_request",
    "log_llm_response",
    "log_metrics",
    "preview",
    "preview_payload",
    "RequestContext",
    "get_user_id",
    "get_request_id",
    "generate_request_id",
    "LOG_DIR",
    "LLMRequestLog",
    "LLMResponseLog",
    "LLMMetrics"
]
