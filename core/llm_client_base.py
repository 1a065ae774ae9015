"""
Gemini Client Base

Two ways to reach the same models:
- "sdk": google-genai async client, model chosen per call
- "rest": POST {base}/{version}/models/{model}:generateContent over aiohttp

Both go through `generate_text_with_logging`, which records the request,
the response and one metrics line per call, and re-raises provider errors
unchanged. `is_model_unavailable` tells "this model is not served" apart
from every other provider failure.

Usage:
    client = BaseLLMClient(LLMConfig(api_key=key, task_name="summarize"))
    text = await client.generate_text_with_logging(prompt, model="gemini-2.5-flash")
"""

import time
import asyncio
import aiohttp
from dataclasses import dataclass
from typing import Optional, Any

from google import genai
from google.genai import types as genai_types
from google.api_core import exceptions as google_exceptions

from config import estimate_tokens
from logs.logging_config import (
    get_llm_logger,
    log_llm_request,
    log_llm_response,
    log_metrics,
)

logger = get_llm_logger()

BACKEND_SDK = "sdk"
BACKEND_REST = "rest"


@dataclass(frozen=True)
class LLMConfig:
    """
    Configuration for an LLM client instance.

    Each module creates its own LLMConfig with module-specific settings.
    Instances are frozen: configuration is established once at process start.

    Example:
        summarization_config = LLMConfig(
            api_key=GEMINI_API_KEY,
            model="gemini-2.0-flash",
            task_name="summarize"
        )
    """
    api_key: str = ""

    # REST surface
    api_base_url: str = "https://generativelanguage.googleapis.com"
    api_version: str = "v1beta"

    # Model settings
    model: str = "gemini-2.0-flash"
    temperature: float = 0.3
    max_tokens: int = 2048

    # Connection settings
    timeout: int = 120
    pool_limit: int = 50

    # Logging identifier
    task_name: str = "unknown"

    def rest_url(self, model: str) -> str:
        """generateContent URL for a model on the REST surface."""
        return f"{self.api_base_url.rstrip('/')}/{self.api_version}/models/{model}:generateContent"


def is_model_unavailable(error: BaseException) -> bool:
    """
    True when a provider error means "this model does not exist / is not served".

    Structured signals win: a google NotFound, or any error exposing an
    HTTP-style ``code``/``status``. The message heuristic ("404" / "not found")
    only applies when the error carries no code at all.
    """
    if isinstance(error, google_exceptions.NotFound):
        return True

    for attr in ("code", "status"):
        code = getattr(error, attr, None)
        if code is None or callable(code):
            continue
        try:
            return int(code) == 404
        except (TypeError, ValueError):
            continue

    message = str(error).lower()
    return "404" in message or "not found" in message


def extract_rest_text(data: Any) -> str:
    """Pull candidates[0].content.parts[0].text out of a generateContent body."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""
    return text if isinstance(text, str) else ""


class BaseLLMClient:
    """
    Base Gemini client with shared logic for the SDK and REST surfaces.

    One instance per module. The SDK client and the aiohttp session are both
    created on first use, so constructing a client never needs credentials.

    Example:
        config = LLMConfig(api_key=key, model="gemini-2.0-flash")
        client = BaseLLMClient(config)

        response = await client.generate_text_with_logging(
            prompt="Summarize this document",
            model="gemini-2.5-flash",
            backend="sdk"
        )
    """

    def __init__(self, config: LLMConfig):
        self.config = config
        self._session: Optional[aiohttp.ClientSession] = None
        self._sdk_client: Optional[genai.Client] = None

        logger.debug(
            f"[{config.task_name.upper()}_LLM] Initialized | "
            f"model={config.model} | url={config.api_base_url}"
        )

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session for this instance."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            connector = aiohttp.TCPConnector(
                limit=self.config.pool_limit,
                limit_per_host=self.config.pool_limit
            )
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector
            )
            logger.debug(f"[{self.config.task_name.upper()}_LLM] Session created")
        return self._session

    def get_sdk_client(self) -> genai.Client:
        """Get or create the google-genai client for this instance."""
        if self._sdk_client is None:
            self._sdk_client = genai.Client(
                api_key=self.config.api_key or None,
                http_options=genai_types.HttpOptions(timeout=self.config.timeout * 1000),
            )
            logger.debug(f"[{self.config.task_name.upper()}_LLM] SDK client created")
        return self._sdk_client

    async def close(self):
        """Close this instance's session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
            logger.debug(f"[{self.config.task_name.upper()}_LLM] Session closed")

    async def generate_text_with_logging(
        self,
        prompt: str,
        model: str = None,
        backend: str = BACKEND_SDK,
        temperature: float = None,
        max_tokens: int = None,
        task: str = None,
    ) -> str:
        """
        Generate text on the given surface with full logging.

        Errors are logged and re-raised unchanged so callers can classify them.

        Args:
            prompt: The prompt to send to the LLM
            model: Override model (uses config.model if not specified)
            backend: "sdk" or "rest"
            temperature: Override temperature
            max_tokens: Override max_tokens
            task: Override task name for logging

        Returns:
            Generated text response (may be empty)
        """
        model_name = model or self.config.model
        temp = temperature if temperature is not None else self.config.temperature
        max_tok = max_tokens if max_tokens is not None else self.config.max_tokens
        task_name = task or self.config.task_name

        request_id = log_llm_request(
            model=model_name,
            backend=backend,
            task=task_name,
            prompt=prompt,
            temperature=temp,
            max_tokens=max_tok
        )
        estimated_tokens = estimate_tokens(prompt)

        start_time = time.time()

        try:
            if backend == BACKEND_REST:
                response = await self._call_rest(prompt, model_name, temp, max_tok)
            else:
                response = await self._call_sdk(prompt, model_name, temp, max_tok)
        except Exception as e:
            self._record_call(request_id, model_name, backend, task_name, prompt, "", start_time, estimated_tokens, e)
            raise

        self._record_call(request_id, model_name, backend, task_name, prompt, response, start_time, estimated_tokens)
        return response

    def _record_call(
        self,
        request_id: str,
        model: str,
        backend: str,
        task: str,
        prompt: str,
        response: str,
        start_time: float,
        estimated_tokens: int,
        error: Optional[BaseException] = None
    ) -> None:
        latency_ms = (time.time() - start_time) * 1000
        status = "success" if error is None else "error"

        log_llm_response(
            request_id=request_id,
            model=model,
            backend=backend,
            response=response,
            latency_ms=latency_ms,
            status=status,
            error_message=None if error is None else str(error)
        )
        log_metrics(
            request_id=request_id,
            model=model,
            backend=backend,
            task=task,
            latency_ms=latency_ms,
            prompt_chars=len(prompt),
            response_chars=len(response),
            status=status,
            estimated_tokens=estimated_tokens
        )

    async def _call_sdk(
        self,
        prompt: str,
        model: str,
        temperature: float,
        max_tokens: int
    ) -> str:
        """
        Call the SDK surface. Provider exceptions propagate untouched.

        Returns:
            Generated text
        """
        logger.debug(f"[{self.config.task_name.upper()}_LLM] Calling SDK | model={model}")

        client = self.get_sdk_client()
        result = await client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=genai_types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
            ),
        )
        return (result.text or "").strip()

    async def _call_rest(
        self,
        prompt: str,
        model: str,
        temperature: float,
        max_tokens: int
    ) -> str:
        """
        Call the generateContent REST endpoint directly.

        Returns:
            Generated text, or "" when the body has no candidate text
        """
        url = self.config.rest_url(model)

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.config.api_key,
        }

        logger.debug(f"[{self.config.task_name.upper()}_LLM] Calling REST | url={url}")

        try:
            session = await self.get_session()
            async with session.post(url, json=payload, headers=headers) as r:
                r.raise_for_status()
                response_data = await r.json()
                return extract_rest_text(response_data).strip()

        except asyncio.TimeoutError:
            logger.error(f"[{self.config.task_name.upper()}_LLM] REST timeout | model={model}")
            raise RuntimeError(
                f"{self.config.task_name.title()} LLM request timed out. Please try again."
            )

        except aiohttp.ClientError as e:
            logger.error(
                f"[{self.config.task_name.upper()}_LLM] REST request failed | "
                f"model={model} | error={e}"
            )
            raise RuntimeError(
                f"{self.config.task_name.title()} LLM service unavailable: {e}"
            )

