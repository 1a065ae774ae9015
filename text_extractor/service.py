"""
Text Extraction Service

FastAPI endpoints for turning an uploaded document into plain text
via the remote parser (plain-text files are read directly).
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from pydantic import BaseModel, Field

from config import MAX_UPLOAD_SIZE_MB
from core.errors import DocumentPipelineError
from core.validators import validate_file_size
from logs.logging_config import get_llm_logger, RequestContext
from .config import PARSER_TEXT_EXTENSIONS
from .orchestrator import ParseOrchestrator
from .parser_client import ParserConfig, LlamaParseClient

logger = get_llm_logger()

# Create router
router = APIRouter(prefix="/api/v1/parse", tags=["Text Extraction"])


# =====================
# Response Models
# =====================

class ParseResponse(BaseModel):
    """Resolved text of an uploaded document."""
    request_id: str = Field(..., description="Unique request identifier")
    file_name: str = Field(..., description="Uploaded file name")
    text: str = Field(..., description="Extracted plain text / markdown")
    source: str = Field(..., description="Where the text was found (direct_text, status_field, ...)")
    job_id: Optional[str] = Field(None, description="Remote parse job id, if the parser was used")
    field_path: Optional[str] = Field(None, description="Payload path the text was read from")
    poll_attempts: int = Field(0, description="Status polls performed")
    char_count: int = Field(..., description="Characters extracted")
    word_count: int = Field(..., description="Words extracted")


# =====================
# Orchestrator Instance
# =====================

_orchestrator: Optional[ParseOrchestrator] = None


def get_orchestrator() -> ParseOrchestrator:
    """Get or create the process-wide orchestrator."""
    global _orchestrator
    if _orchestrator is None:
        config = ParserConfig()
        _orchestrator = ParseOrchestrator(LlamaParseClient(config), config)
    return _orchestrator


async def close_orchestrator():
    """Close the parser session. Call this on application shutdown."""
    global _orchestrator
    if _orchestrator is not None:
        await _orchestrator.close()
        _orchestrator = None


# =====================
# API Endpoints
# =====================

@router.post("/upload", response_model=ParseResponse)
async def parse_upload(
    file: UploadFile = File(..., description="Document file (any format the parser accepts)"),
    orchestrator: ParseOrchestrator = Depends(get_orchestrator)
):
    """
    Extract text from an uploaded document.

    - `.txt` files are read directly
    - Everything else is submitted to the parser and polled until done
    """
    request_id = str(uuid.uuid4())

    with RequestContext(request_id):
        file_name = file.filename or "document"
        content = await file.read()

        try:
            validate_file_size(len(content), MAX_UPLOAD_SIZE_MB, "Parser")
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        logger.info(f"[PARSE_UPLOAD] START | file={file_name} | bytes={len(content)}")

        try:
            result = await orchestrator.extract(content, file_name, file.content_type)
        except DocumentPipelineError as e:
            logger.error(f"[PARSE_UPLOAD] ERROR | kind={e.kind} | error={e.message}")
            raise HTTPException(status_code=500, detail=e.to_dict())

        logger.info(f"[PARSE_UPLOAD] END | source={result.source.value} | chars={result.char_count}")

        return ParseResponse(
            request_id=request_id,
            file_name=result.file_name,
            text=result.text,
            source=result.source.value,
            job_id=result.job_id,
            field_path=result.field_path,
            poll_attempts=result.poll_attempts,
            char_count=result.char_count,
            word_count=result.word_count
        )


@router.get("/config")
async def get_parser_config():
    """Polling budget and endpoints used for parsing (no credentials)."""
    config = ParserConfig()
    return {
        "base_url": config.base_url,
        "max_poll_attempts": config.max_poll_attempts,
        "poll_interval_seconds": config.poll_interval,
        "timeout_budget_seconds": config.timeout_budget,
        "result_paths": list(config.result_paths),
        "min_text_length": config.min_text_length,
        "direct_text_extensions": sorted(PARSER_TEXT_EXTENSIONS),
        "max_upload_size_mb": MAX_UPLOAD_SIZE_MB
    }
