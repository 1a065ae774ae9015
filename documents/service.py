"""
Document processing endpoint.

Pipeline: Upload -> temp file -> Extraction (direct text or remote parser)
-> Summarization in the requested language. The temp file is removed on
every exit path.
"""
import os
import uuid
import tempfile
import traceback
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config import MAX_UPLOAD_SIZE_MB, UPLOAD_DIR, DEBUG_ERRORS
from core.errors import DocumentPipelineError
from core.validators import validate_file_size, validate_required_field
from logs.logging_config import get_llm_logger, RequestContext
from summarization.service import get_summarizer
from text_extractor.service import get_orchestrator
from .pipeline import DocumentPipeline

logger = get_llm_logger()

router = APIRouter(prefix="/api", tags=["Documents"])


class ProcessDocumentResponse(BaseModel):
    """Summary of an uploaded document (camelCase on the wire)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    request_id: str = Field(..., description="Unique request identifier")
    summary: str = Field(..., description="Generated summary")
    original_language: str = Field(..., description="Assumed language of the source document")
    target_language: str = Field(..., description="Language of the summary")
    model: str = Field(..., description="Model that produced the summary")
    extraction_source: str = Field(..., description="How the document text was obtained")


def get_pipeline() -> DocumentPipeline:
    return DocumentPipeline(get_orchestrator(), get_summarizer())


def _remove_file(path: Optional[str]) -> None:
    if path and os.path.exists(path):
        try:
            os.unlink(path)
        except OSError as e:
            logger.error(f"[PROCESS_DOCUMENT] Error deleting temp file | path={path} | error={e}")


@router.post("/process-document", response_model=ProcessDocumentResponse)
async def process_document(
    file: Optional[UploadFile] = File(None, description="Health document to summarize"),
    language: Optional[str] = Form(None, description="Target language for the summary"),
    pipeline: DocumentPipeline = Depends(get_pipeline)
):
    """
    Parse an uploaded document and summarize it in the requested language.

    **Form Parameters:**
    - `file`: The document (required). `.txt` files skip the remote parser.
    - `language`: Target language name or alias (required)
    """
    if file is None:
        raise HTTPException(status_code=400, detail={"error": "No file uploaded"})
    try:
        validate_required_field(language, "language", "Process document")
    except ValueError:
        raise HTTPException(status_code=400, detail={"error": "Language not specified"})

    request_id = str(uuid.uuid4())

    with RequestContext(request_id):
        file_name = file.filename or "document"
        file_ext = Path(file_name).suffix.lower()
        temp_path = None

        logger.info(f"[PROCESS_DOCUMENT] START | request_id={request_id} | file={file_name} | language={language}")

        try:
            content = await file.read()
            try:
                validate_file_size(len(content), MAX_UPLOAD_SIZE_MB, "Process document")
            except ValueError as e:
                raise HTTPException(status_code=400, detail={"error": str(e)})

            Path(UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(delete=False, suffix=file_ext, dir=UPLOAD_DIR) as temp_file:
                temp_file.write(content)
                temp_path = temp_file.name

            logger.debug(f"[PROCESS_DOCUMENT] Saved to temp: {temp_path}")

            result = await pipeline.process_file(
                Path(temp_path), file_name, language, file.content_type
            )

            logger.info(
                f"[PROCESS_DOCUMENT] END | request_id={request_id} | model={result.model} | "
                f"summary_chars={len(result.summary)}"
            )

            return ProcessDocumentResponse(
                request_id=request_id,
                summary=result.summary,
                original_language=result.original_language,
                target_language=result.target_language,
                model=result.model,
                extraction_source=result.extraction.source.value
            )

        except HTTPException:
            raise
        except DocumentPipelineError as e:
            logger.error(
                f"[PROCESS_DOCUMENT] ERROR | request_id={request_id} | kind={e.kind} | error={e.message}"
            )
            detail = e.to_dict()
            detail["error"] = "Failed to process document"
            detail["kind"] = e.kind
            if DEBUG_ERRORS:
                detail["stack"] = traceback.format_exc()
            raise HTTPException(status_code=500, detail=detail)
        except Exception as e:
            logger.exception(
                f"[PROCESS_DOCUMENT] UNEXPECTED ERROR | request_id={request_id} | error={e}"
            )
            detail = {"error": "Failed to process document", "message": str(e)}
            if DEBUG_ERRORS:
                detail["stack"] = traceback.format_exc()
            raise HTTPException(status_code=500, detail=detail)

        finally:
            _remove_file(temp_path)
