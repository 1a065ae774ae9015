"""
Parser Client

Thin async HTTP transport for the remote document parsing service.
Connection pooling via one aiohttp session per client instance.

Decision logic (legacy fallbacks, status handling, result resolution)
lives in the orchestrator; this module only moves bytes and JSON.
"""

import json
import asyncio
import aiohttp
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from logs.logging_config import get_llm_logger, preview, preview_payload
from .config import (
    PARSER_API_KEY,
    PARSER_BASE_URL,
    PARSER_UPLOAD_PATH,
    PARSER_STATUS_PATH,
    PARSER_LEGACY_STATUS_PATH,
    PARSER_RESULT_PATHS,
    PARSER_JOB_ID_FIELDS,
    PARSER_MAX_POLL_ATTEMPTS,
    PARSER_POLL_INTERVAL_SECONDS,
    PARSER_SETTLE_DELAY_SECONDS,
    PARSER_UPLOAD_TIMEOUT,
    PARSER_STATUS_TIMEOUT,
    PARSER_RESULT_TIMEOUT,
    PARSER_CONNECTION_POOL_LIMIT,
    PARSER_MIN_TEXT_LENGTH,
)

logger = get_llm_logger()


@dataclass(frozen=True)
class ParserConfig:
    """
    Configuration for a parse client / orchestrator pair.

    Built once at process start from module config; tests build their own
    (e.g. zero poll interval).
    """
    api_key: str = PARSER_API_KEY
    base_url: str = PARSER_BASE_URL

    upload_path: str = PARSER_UPLOAD_PATH
    status_path: str = PARSER_STATUS_PATH
    legacy_status_path: str = PARSER_LEGACY_STATUS_PATH
    result_paths: Tuple[str, ...] = field(default_factory=lambda: tuple(PARSER_RESULT_PATHS))
    job_id_fields: Tuple[str, ...] = field(default_factory=lambda: tuple(PARSER_JOB_ID_FIELDS))

    max_poll_attempts: int = PARSER_MAX_POLL_ATTEMPTS
    poll_interval: float = PARSER_POLL_INTERVAL_SECONDS
    settle_delay: float = PARSER_SETTLE_DELAY_SECONDS

    upload_timeout: int = PARSER_UPLOAD_TIMEOUT
    status_timeout: int = PARSER_STATUS_TIMEOUT
    result_timeout: int = PARSER_RESULT_TIMEOUT
    pool_limit: int = PARSER_CONNECTION_POOL_LIMIT

    min_text_length: int = PARSER_MIN_TEXT_LENGTH

    @property
    def timeout_budget(self) -> float:
        """Total seconds the poll loop may spend waiting."""
        return self.max_poll_attempts * self.poll_interval

    def url(self, path: str, job_id: Optional[str] = None) -> str:
        if job_id is not None:
            path = path.format(job_id=job_id)
        return f"{self.base_url.rstrip('/')}{path}"


class ParserHTTPError(Exception):
    """The parser answered with a non-2xx status."""

    def __init__(self, status: int, url: str, body: Any = None):
        self.status = status
        self.url = url
        self.body = body
        message = f"HTTP {status} from {url}"
        if body:
            message += f": {preview(body)}"
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


def is_not_found(error: BaseException) -> bool:
    return isinstance(error, ParserHTTPError) and error.is_not_found


def _decode_body(raw: str) -> Any:
    """JSON when it parses, otherwise the raw text (download endpoints may return plain markdown)."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


class LlamaParseClient:
    """
    Async client for the LlamaParse REST API.

    Example:
        client = LlamaParseClient(ParserConfig())
        upload = await client.submit(file_bytes, "report.pdf")
        status = await client.get(config.status_path, job_id=upload["id"])
    """

    def __init__(self, config: ParserConfig):
        self.config = config
        self._session: Optional[aiohttp.ClientSession] = None

        logger.debug(f"[PARSER] Initialized | url={config.base_url}")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Accept": "application/json",
        }

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session (per-request timeouts are set on each call)."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.config.pool_limit,
                limit_per_host=self.config.pool_limit
            )
            self._session = aiohttp.ClientSession(connector=connector)
            logger.debug("[PARSER] Session created")
        return self._session

    async def close(self):
        """Close this client's session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
            logger.debug("[PARSER] Session closed")

    async def _request(self, method: str, url: str, timeout: int, **kwargs) -> Any:
        session = await self.get_session()
        async with session.request(
            method,
            url,
            headers=self._headers(),
            timeout=aiohttp.ClientTimeout(total=timeout),
            **kwargs
        ) as r:
            raw = await r.text()
            body = _decode_body(raw)
            if r.status >= 400:
                raise ParserHTTPError(r.status, url, body)
            return body

    async def submit(self, file_bytes: bytes, file_name: str) -> Any:
        """
        Upload a document as multipart/form-data.

        Returns:
            Decoded upload response (expected to carry the job id)

        Raises:
            ParserHTTPError: Non-2xx answer
            aiohttp.ClientError / asyncio.TimeoutError: Transport failure
        """
        url = self.config.url(self.config.upload_path)

        form = aiohttp.FormData()
        form.add_field(
            "file",
            file_bytes,
            filename=file_name,
            content_type="application/octet-stream"
        )

        logger.info(f"[PARSER] Uploading | file={file_name} | bytes={len(file_bytes)}")
        response = await self._request("POST", url, self.config.upload_timeout, data=form)
        logger.debug(f"[PARSER] Upload response | body={preview_payload(response)}")
        return response

    async def get(self, path: str, job_id: str, timeout: Optional[int] = None) -> Any:
        """
        GET a job-scoped path (status or result endpoint).

        Raises:
            ParserHTTPError: Non-2xx answer
            aiohttp.ClientError / asyncio.TimeoutError: Transport failure
        """
        url = self.config.url(path, job_id)
        return await self._request("GET", url, timeout or self.config.status_timeout)


TRANSPORT_ERRORS = (ParserHTTPError, aiohttp.ClientError, asyncio.TimeoutError)
