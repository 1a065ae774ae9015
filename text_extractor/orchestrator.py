"""
Parse Orchestrator

Turns an uploaded document into plain text:

1. Plain-text uploads are decoded directly (no network call).
2. Anything else is submitted to the remote parser, which answers with a job id.
3. The job is polled at a fixed interval up to a fixed attempt budget.
   Status is read from the versioned path, falling back to the legacy path.
4. On SUCCESS the text is resolved from the payload, then from the alternate
   result endpoints, then from a fresh status read, and finally by
   unstructured extraction.

Transport hiccups while polling are logged and retried. An ERROR status,
a vanished job (404) and an exhausted budget are terminal.
"""

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Optional

from core.errors import (
    UploadFailedError,
    NoJobIdError,
    JobFailedError,
    ParseTimeoutError,
    ExtractionFailedError,
    TransientParseError,
)
from logs.logging_config import get_llm_logger, preview, preview_payload
from .config import PARSER_TEXT_EXTENSIONS
from .parser_client import ParserConfig, LlamaParseClient, TRANSPORT_ERRORS, is_not_found
from .resolver import resolve_field, extract_unstructured
from .schemas import (
    JobStatus,
    ParseJob,
    ResolvedField,
    ExtractionResult,
    ExtractionSource,
)

logger = get_llm_logger()

# Malformed bodies count as transport noise while polling
RECOVERABLE_ERRORS = TRANSPORT_ERRORS + (ValueError,)

TEXT_CONTENT_TYPES = {"text/plain"}


def is_plain_text(file_name: str, content_type: Optional[str] = None) -> bool:
    """True when the upload should bypass the remote parser."""
    if Path(file_name or "").suffix.lower() in PARSER_TEXT_EXTENSIONS:
        return True
    if content_type:
        return content_type.split(";")[0].strip().lower() in TEXT_CONTENT_TYPES
    return False


def read_text_file(file_bytes: bytes) -> str:
    """Decode a plain-text upload (UTF-8, BOM tolerated)."""
    return file_bytes.decode("utf-8-sig", errors="replace")


def _job_id_from(response: Any, fields) -> Optional[str]:
    if not isinstance(response, Mapping):
        return None
    for name in fields:
        value = response.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def _remote_error_message(payload: Any) -> Optional[str]:
    if not isinstance(payload, Mapping):
        return None
    for name in ("error", "message", "error_message"):
        value = payload.get(name)
        if value:
            return value if isinstance(value, str) else preview(value)
    return None


class ParseOrchestrator:
    """
    Submits documents to the remote parser and resolves their text.

    Holds no per-request state: every call works on its own ParseJob, so one
    instance can serve concurrent requests.

    Example:
        orchestrator = ParseOrchestrator(LlamaParseClient(config), config)
        result = await orchestrator.extract(file_bytes, "labs.pdf")
        print(result.text)
    """

    def __init__(
        self,
        client: LlamaParseClient,
        config: Optional[ParserConfig] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.client = client
        self.config = config or client.config
        self._sleep = sleep

    async def close(self):
        await self.client.close()

    # =====================
    # Entry points
    # =====================

    async def extract(
        self,
        file_bytes: bytes,
        file_name: str,
        content_type: Optional[str] = None
    ) -> ExtractionResult:
        """
        Resolve the text of an upload, reading plain-text files directly.

        Raises:
            ParseError subclasses (see `parse`)
        """
        if is_plain_text(file_name, content_type):
            text = read_text_file(file_bytes)
            logger.info(f"[PARSE] Read text file directly | file={file_name} | chars={len(text)}")
            if not text.strip():
                raise ExtractionFailedError(f"Text file {file_name} is empty")
            return ExtractionResult(
                text=text,
                source=ExtractionSource.DIRECT_TEXT,
                file_name=file_name,
            )

        return await self.parse(file_bytes, file_name)

    async def parse(self, file_bytes: bytes, file_name: str) -> ExtractionResult:
        """
        Run a document through the remote parser.

        Raises:
            UploadFailedError: Upload request failed
            NoJobIdError: Upload answered without a job id
            JobFailedError: Parser reported ERROR
            TransientParseError: Job vanished (404) while polling
            ParseTimeoutError: Attempt budget exhausted
            ExtractionFailedError: SUCCESS but the resolved text is blank
        """
        job = await self.submit(file_bytes, file_name)
        status_payload = await self.wait_for_completion(job)
        result = await self.resolve_result(job, status_payload)

        if not result.text.strip():
            raise ExtractionFailedError(
                "No text extracted from document",
                {"job_id": job.id, "source": result.source.value},
            )

        logger.info(
            f"[PARSE] END | job_id={job.id} | source={result.source.value} | "
            f"path={result.field_path} | chars={result.char_count} | attempts={job.elapsed_attempts}"
        )
        return result

    # =====================
    # Steps
    # =====================

    async def submit(self, file_bytes: bytes, file_name: str) -> ParseJob:
        """Upload the document and open a ParseJob for it."""
        try:
            response = await self.client.submit(file_bytes, file_name)
        except RECOVERABLE_ERRORS as e:
            logger.error(f"[PARSE] Upload failed | file={file_name} | error={e}")
            raise UploadFailedError(f"Document upload to parser failed: {e}") from e

        job_id = _job_id_from(response, self.config.job_id_fields)
        if not job_id:
            logger.error(f"[PARSE] No job id in upload response | response={preview_payload(response)}")
            raise NoJobIdError(
                f"No job ID returned from parser. Response: {preview(response)}"
            )

        logger.info(f"[PARSE] Job submitted | job_id={job_id} | file={file_name}")
        return ParseJob(id=job_id, file_name=file_name)

    async def fetch_status(self, job_id: str) -> Any:
        """Read job status from the primary path, then the legacy path."""
        try:
            return await self.client.get(
                self.config.status_path, job_id, timeout=self.config.status_timeout
            )
        except RECOVERABLE_ERRORS as e:
            logger.debug(f"[PARSE_POLL] Primary status path failed, trying legacy | error={e}")
            return await self.client.get(
                self.config.legacy_status_path, job_id, timeout=self.config.status_timeout
            )

    async def wait_for_completion(self, job: ParseJob) -> Any:
        """
        Poll until the job reaches SUCCESS.

        Returns:
            The SUCCESS status payload
        """
        while job.elapsed_attempts < self.config.max_poll_attempts:
            await self._sleep(self.config.poll_interval)
            job.elapsed_attempts += 1

            try:
                payload = await self.fetch_status(job.id)
            except RECOVERABLE_ERRORS as e:
                if is_not_found(e):
                    logger.error(f"[PARSE_POLL] Job not found | job_id={job.id}")
                    raise TransientParseError(job.id) from e
                logger.warning(
                    f"[PARSE_POLL] Error polling status | job_id={job.id} | "
                    f"attempt={job.elapsed_attempts} | error={e}"
                )
                continue

            remote_status = payload.get("status") if isinstance(payload, Mapping) else None
            job.status = JobStatus.from_remote(remote_status)

            logger.info(
                f"[PARSE_POLL] attempt={job.elapsed_attempts}/{self.config.max_poll_attempts} | "
                f"job_id={job.id} | status={remote_status}"
            )
            logger.debug(f"[PARSE_POLL] Status payload | body={preview_payload(payload)}")

            if job.status.is_terminal:
                if job.status is JobStatus.ERROR:
                    raise JobFailedError(job.id, _remote_error_message(payload))
                return payload
            if job.status is JobStatus.UNKNOWN:
                logger.info(f"[PARSE_POLL] Unknown status | job_id={job.id} | status={remote_status}")

        logger.error(
            f"[PARSE_POLL] Timed out | job_id={job.id} | attempts={job.elapsed_attempts} | "
            f"submitted_at={job.submitted_at}"
        )
        raise ParseTimeoutError(job.id, job.elapsed_attempts, self.config.timeout_budget)

    async def resolve_result(self, job: ParseJob, status_payload: Any) -> ExtractionResult:
        """Find the document text for a job that reported SUCCESS."""
        if self.config.settle_delay:
            await self._sleep(self.config.settle_delay)

        found = resolve_field(status_payload)
        if found is not None:
            return self._result(job, found, ExtractionSource.STATUS_FIELD)

        logger.info(f"[PARSE_RESULT] No text in status payload, trying result endpoints | job_id={job.id}")

        endpoint_payload = None
        for path in self.config.result_paths:
            try:
                payload = await self.client.get(path, job.id, timeout=self.config.result_timeout)
            except RECOVERABLE_ERRORS as e:
                logger.info(f"[PARSE_RESULT] Endpoint failed | path={path} | error={e}")
                continue

            if endpoint_payload is None:
                endpoint_payload = payload

            found = resolve_field(payload)
            if found is not None:
                logger.info(f"[PARSE_RESULT] Got result | path={path} | field={found.path}")
                return self._result(job, found, ExtractionSource.RESULT_ENDPOINT)
            logger.info(f"[PARSE_RESULT] Endpoint answered without text | path={path}")

        fallback_payload = status_payload
        try:
            fresh = await self.fetch_status(job.id)
        except RECOVERABLE_ERRORS as e:
            logger.info(f"[PARSE_RESULT] Fresh status check failed | job_id={job.id} | error={e}")
        else:
            found = resolve_field(fresh)
            if found is not None:
                return self._result(job, found, ExtractionSource.STATUS_REFETCH)
            fallback_payload = fresh

        candidates = [fallback_payload] if endpoint_payload is None else [endpoint_payload, fallback_payload]
        found, source = extract_unstructured(candidates, self.config.min_text_length)
        return self._result(job, found, source)

    def _result(self, job: ParseJob, found: ResolvedField, source: ExtractionSource) -> ExtractionResult:
        return ExtractionResult(
            text=found.text,
            source=source,
            file_name=job.file_name,
            job_id=job.id,
            field_path=found.path,
            poll_attempts=job.elapsed_attempts,
        )
