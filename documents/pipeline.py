"""
Document pipeline: extract -> summarize.

Each call is an independent sequential run; the only state shared between
runs is the read-only configuration held by the two components.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from core.errors import ExtractionFailedError
from logs.logging_config import get_llm_logger
from summarization.config import SUMMARIZATION_SOURCE_LANGUAGE
from summarization.languages import resolve_language
from summarization.summarizer import SummarizationClient, SummaryRequest
from text_extractor.orchestrator import ParseOrchestrator
from text_extractor.schemas import ExtractionResult

logger = get_llm_logger()


@dataclass
class DocumentSummary:
    """Successful pipeline output."""
    summary: str
    target_language: str
    model: str
    backend: str
    extraction: ExtractionResult
    original_language: str = SUMMARIZATION_SOURCE_LANGUAGE


class DocumentPipeline:
    """
    Runs one uploaded document through parsing and summarization.

    Failures surface as DocumentPipelineError subclasses; nothing partial is
    ever returned.
    """

    def __init__(self, orchestrator: ParseOrchestrator, summarizer: SummarizationClient):
        self.orchestrator = orchestrator
        self.summarizer = summarizer

    async def process(
        self,
        file_bytes: bytes,
        file_name: str,
        language: str,
        content_type: Optional[str] = None
    ) -> DocumentSummary:
        target_language = resolve_language(language)

        logger.info(f"[PIPELINE] Parsing document | file={file_name} | language={target_language}")
        extraction = await self.orchestrator.extract(file_bytes, file_name, content_type)

        if not extraction.text.strip():
            raise ExtractionFailedError("No text content extracted from the document")

        logger.info(
            f"[PIPELINE] Parsed document | source={extraction.source.value} | chars={extraction.char_count}"
        )

        logger.info("[PIPELINE] Summarizing")
        result = await self.summarizer.run(
            SummaryRequest(text=extraction.text, target_language=target_language)
        )

        return DocumentSummary(
            summary=result.summary,
            target_language=target_language,
            model=result.model,
            backend=result.backend,
            extraction=extraction
        )

    async def process_file(
        self,
        file_path: Path,
        file_name: str,
        language: str,
        content_type: Optional[str] = None
    ) -> DocumentSummary:
        """Same as `process` for an upload already stored on disk."""
        return await self.process(Path(file_path).read_bytes(), file_name, language, content_type)
