"""
Localized summarization with model fallback.

One prompt is tried against an ordered list of candidate models on the SDK
surface, stopping at the first success:
- "model not found"-class failures move on to the next candidate
- any other failure (auth, quota, safety...) aborts the chain as UpstreamError
- once every candidate is unavailable, one direct REST call is made against
  a fixed default model; if that fails too the result is AllModelsFailed
"""
from dataclasses import dataclass, field
from typing import List, Optional

from core import (
    BaseLLMClient,
    BACKEND_SDK,
    BACKEND_REST,
    is_model_unavailable,
    AllModelsFailedError,
    UpstreamError,
    validate_required_field,
)
from logs.logging_config import get_llm_logger
from .config import SUMMARIZATION_CANDIDATE_MODELS, SUMMARIZATION_REST_MODEL
from .prompts import get_summary_prompt

logger = get_llm_logger()


@dataclass(frozen=True)
class SummaryRequest:
    """Immutable input to the summarizer."""
    text: str
    target_language: str


@dataclass
class ModelAttempt:
    """Outcome of one trial against a named backend model."""
    model: str
    backend: str
    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.text is not None

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "backend": self.backend,
            "succeeded": self.succeeded,
            "error": self.error,
        }


@dataclass
class SummaryResult:
    """Summary text plus the chain of attempts that produced it."""
    summary: str
    model: str
    backend: str
    target_language: str
    attempts: List[ModelAttempt] = field(default_factory=list)


class SummarizationClient:
    """
    Summarizes text into a target language, surviving model unavailability.

    Example:
        client = SummarizationClient(get_client())
        summary = await client.summarize(text, "Spanish")
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        candidate_models: Optional[List[str]] = None,
        rest_model: Optional[str] = None,
    ):
        self.llm_client = llm_client
        self.candidate_models = list(candidate_models if candidate_models is not None else SUMMARIZATION_CANDIDATE_MODELS)
        self.rest_model = rest_model or SUMMARIZATION_REST_MODEL

    async def summarize(self, text: str, target_language: str) -> str:
        """
        Summarize `text` in `target_language`.

        Raises:
            UpstreamError: A candidate failed for a reason other than availability
            AllModelsFailedError: No candidate and no REST fallback produced text
        """
        result = await self.run(SummaryRequest(text=text, target_language=target_language))
        return result.summary

    async def run(self, request: SummaryRequest) -> SummaryResult:
        """Run the fallback chain and return the summary with its attempt history."""
        validate_required_field(request.text, "text", "Summarization")
        validate_required_field(request.target_language, "target_language", "Summarization")

        prompt = get_summary_prompt(request.text, request.target_language)
        attempts: List[ModelAttempt] = []

        logger.info(
            f"[SUMMARIZE] START | chars={len(request.text)} | language={request.target_language} | "
            f"candidates={self.candidate_models}"
        )

        for model in self.candidate_models:
            logger.info(f"[SUMMARIZE] Trying model | model={model}")
            try:
                text = await self.llm_client.generate_text_with_logging(
                    prompt=prompt,
                    model=model,
                    backend=BACKEND_SDK
                )
            except Exception as e:
                if is_model_unavailable(e):
                    logger.info(f"[SUMMARIZE] Model unavailable, trying next | model={model} | error={e}")
                    attempts.append(ModelAttempt(model=model, backend=BACKEND_SDK, error=str(e)))
                    continue
                logger.error(f"[SUMMARIZE] Model failed, aborting chain | model={model} | error={e}")
                raise UpstreamError(model, e) from e

            if text:
                attempts.append(ModelAttempt(model=model, backend=BACKEND_SDK, text=text))
                logger.info(f"[SUMMARIZE] END | model={model} | output_chars={len(text)}")
                return SummaryResult(
                    summary=text,
                    model=model,
                    backend=BACKEND_SDK,
                    target_language=request.target_language,
                    attempts=attempts
                )

            logger.warning(f"[SUMMARIZE] Empty response, trying next | model={model}")
            attempts.append(ModelAttempt(model=model, backend=BACKEND_SDK, error="empty response"))

        return await self._rest_fallback(prompt, request, attempts)

    async def _rest_fallback(
        self,
        prompt: str,
        request: SummaryRequest,
        attempts: List[ModelAttempt]
    ) -> SummaryResult:
        logger.info(f"[SUMMARIZE] SDK models failed, trying REST API directly | model={self.rest_model}")

        try:
            text = await self.llm_client.generate_text_with_logging(
                prompt=prompt,
                model=self.rest_model,
                backend=BACKEND_REST
            )
        except Exception as e:
            attempts.append(ModelAttempt(model=self.rest_model, backend=BACKEND_REST, error=str(e)))
            logger.error(f"[SUMMARIZE] REST fallback failed | model={self.rest_model} | error={e}")
            raise AllModelsFailedError(
                f"Failed to get response from summarization API: {e}", attempts
            ) from e

        if not text:
            attempts.append(ModelAttempt(model=self.rest_model, backend=BACKEND_REST, error="no text in response"))
            logger.error(f"[SUMMARIZE] REST fallback returned no text | model={self.rest_model}")
            raise AllModelsFailedError(
                "Failed to get response from summarization API: no text in response", attempts
            )

        attempts.append(ModelAttempt(model=self.rest_model, backend=BACKEND_REST, text=text))
        logger.info(f"[SUMMARIZE] END | model={self.rest_model} | backend=rest | output_chars={len(text)}")
        return SummaryResult(
            summary=text,
            model=self.rest_model,
            backend=BACKEND_REST,
            target_language=request.target_language,
            attempts=attempts
        )
