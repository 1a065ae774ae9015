"""
Logging setup for the document pipeline and LLM calls.

Provides:
- Console + rotating file handlers with request/user context on every line
- Request-scoped context (request_id, user_id) via contextvars
- Structured helpers for LLM request/response/metrics records
"""
import json
import logging
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, asdict, field
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Dict, Any

from .config import (
    LOG_OUTPUT_DIR,
    LOG_LEVEL,
    LOG_TO_FILE,
    LOG_MAX_BYTES,
    LOG_BACKUP_COUNT,
    LOG_PREVIEW_LENGTH,
    LOG_PAYLOAD_PREVIEW_LENGTH,
    LOG_DATE_FORMAT,
    LOG_FILE_FORMAT,
    LOG_CONSOLE_FORMAT,
    LOG_METRICS_FORMAT,
    LOG_FILE_PIPELINE,
    LOG_FILE_ERRORS,
    LOG_FILE_METRICS,
    LOG_FILE_DEBUG,
)

LOG_DIR = Path(LOG_OUTPUT_DIR)

LLM_LOGGER_NAME = "doc_summarizer"
METRICS_LOGGER_NAME = "doc_summarizer.metrics"

_request_id: ContextVar[str] = ContextVar("request_id", default="-")
_user_id: ContextVar[str] = ContextVar("user_id", default="-")

_configured = False


# =========================
# Context Management
# =========================

def generate_request_id() -> str:
    return str(uuid.uuid4())


def get_request_id() -> str:
    return _request_id.get()


def get_user_id() -> str:
    return _user_id.get()


class RequestContext:
    """
    Bind a request id (and optionally a user id) for the duration of a block.

    Example:
        with RequestContext(request_id, user_id="u-1"):
            await pipeline.run(...)
    """

    def __init__(self, request_id: Optional[str] = None, user_id: Optional[str] = None):
        self.request_id = request_id or generate_request_id()
        self.user_id = user_id
        self._request_token = None
        self._user_token = None

    def __enter__(self) -> "RequestContext":
        self._request_token = _request_id.set(self.request_id)
        if self.user_id is not None:
            self._user_token = _user_id.set(self.user_id)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        _request_id.reset(self._request_token)
        if self._user_token is not None:
            _user_id.reset(self._user_token)


class ContextFilter(logging.Filter):
    """Inject request_id / user_id into every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()
        record.user_id = _user_id.get()
        return True


# =========================
# Setup
# =========================

def _file_handler(filename: str, level: int, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        LOG_DIR / filename,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=LOG_DATE_FORMAT))
    handler.addFilter(ContextFilter())
    return handler


def setup_llm_logging(level: str = LOG_LEVEL, to_file: bool = LOG_TO_FILE) -> logging.Logger:
    """
    Configure the pipeline and metrics loggers. Safe to call more than once.

    Args:
        level: Console log level name
        to_file: Also write rotating files under LOG_DIR

    Returns:
        The pipeline logger
    """
    global _configured

    logger = logging.getLogger(LLM_LOGGER_NAME)
    metrics_logger = logging.getLogger(METRICS_LOGGER_NAME)

    if _configured:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    metrics_logger.setLevel(logging.INFO)
    metrics_logger.propagate = False

    console = logging.StreamHandler()
    console.setLevel(getattr(logging, level, logging.INFO))
    console.setFormatter(logging.Formatter(LOG_CONSOLE_FORMAT, datefmt=LOG_DATE_FORMAT))
    console.addFilter(ContextFilter())
    logger.addHandler(console)

    if to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_file_handler(LOG_FILE_PIPELINE, logging.INFO, LOG_FILE_FORMAT))
        logger.addHandler(_file_handler(LOG_FILE_ERRORS, logging.ERROR, LOG_FILE_FORMAT))
        logger.addHandler(_file_handler(LOG_FILE_DEBUG, logging.DEBUG, LOG_FILE_FORMAT))
        metrics_logger.addHandler(_file_handler(LOG_FILE_METRICS, logging.INFO, LOG_METRICS_FORMAT))

    _configured = True
    return logger


def get_llm_logger() -> logging.Logger:
    """Get the shared pipeline logger (configured lazily)."""
    return setup_llm_logging()


def get_metrics_logger() -> logging.Logger:
    setup_llm_logging()
    return logging.getLogger(METRICS_LOGGER_NAME)


def preview(text: Any, length: int = LOG_PREVIEW_LENGTH) -> str:
    """Single-line, truncated rendering for log messages."""
    if not isinstance(text, str):
        try:
            text = json.dumps(text, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            text = repr(text)
    text = text.replace("\n", "\\n")
    if len(text) > length:
        return text[:length] + "..."
    return text


def preview_payload(payload: Any) -> str:
    """Preview a parser response body."""
    return preview(payload, LOG_PAYLOAD_PREVIEW_LENGTH)


# =========================
# LLM Call Records
# =========================

@dataclass
class LLMRequestLog:
    request_id: str
    model: str
    backend: str
    task: str
    prompt_chars: int
    prompt_preview: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass
class LLMResponseLog:
    request_id: str
    model: str
    backend: str
    status: str
    latency_ms: float
    response_chars: int
    response_preview: str
    error_message: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass
class LLMMetrics:
    request_id: str
    model: str
    backend: str
    task: str
    latency_ms: float
    prompt_chars: int
    response_chars: int
    status: str
    estimated_tokens: Optional[int] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


def log_llm_request(
    model: str,
    backend: str,
    task: str,
    prompt: str,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> str:
    """Log an outgoing LLM call. Returns the id used to correlate the response."""
    request_id = get_request_id()
    if request_id == "-":
        request_id = generate_request_id()

    entry = LLMRequestLog(
        request_id=request_id,
        model=model,
        backend=backend,
        task=task,
        prompt_chars=len(prompt),
        prompt_preview=preview(prompt),
        temperature=temperature,
        max_tokens=max_tokens,
    )
    get_llm_logger().info(
        f"[LLM_REQUEST] model={entry.model} | backend={entry.backend} | "
        f"task={entry.task} | prompt_chars={entry.prompt_chars}"
    )
    get_llm_logger().debug(f"[LLM_REQUEST] prompt_preview={entry.prompt_preview}")
    return request_id


def log_llm_response(
    request_id: str,
    model: str,
    backend: str,
    response: str,
    latency_ms: float,
    status: str = "success",
    error_message: Optional[str] = None,
) -> None:
    entry = LLMResponseLog(
        request_id=request_id,
        model=model,
        backend=backend,
        status=status,
        latency_ms=round(latency_ms, 2),
        response_chars=len(response),
        response_preview=preview(response),
        error_message=error_message,
    )
    logger = get_llm_logger()
    if status == "success":
        logger.info(
            f"[LLM_RESPONSE] model={entry.model} | backend={entry.backend} | "
            f"latency_ms={entry.latency_ms} | response_chars={entry.response_chars}"
        )
    else:
        logger.warning(
            f"[LLM_RESPONSE] {status.upper()} | model={entry.model} | backend={entry.backend} | "
            f"latency_ms={entry.latency_ms} | error={entry.error_message}"
        )


def log_metrics(
    request_id: str,
    model: str,
    backend: str,
    task: str,
    latency_ms: float,
    prompt_chars: int,
    response_chars: int,
    status: str,
    estimated_tokens: Optional[int] = None,
) -> Dict[str, Any]:
    """Write one JSON line to the metrics log and return the record."""
    metrics = LLMMetrics(
        request_id=request_id,
        model=model,
        backend=backend,
        task=task,
        latency_ms=round(latency_ms, 2),
        prompt_chars=prompt_chars,
        response_chars=response_chars,
        status=status,
        estimated_tokens=estimated_tokens,
    )
    record = asdict(metrics)
    get_metrics_logger().info(json.dumps(record, ensure_ascii=False))
    return record
