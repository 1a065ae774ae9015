"""
Pipeline Errors

Every terminal failure of the parse or summarization stage is raised as one
of these. `kind` is the stable error name returned to API callers; `message`
is human readable and carries remote-supplied detail when there is any.
"""

from typing import Any, Dict, List, Optional


class DocumentPipelineError(Exception):
    """Base class for all pipeline failures."""

    kind = "PipelineError"
    suggestion: Optional[str] = None

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> Dict[str, Any]:
        data = {"error": self.kind, "message": self.message, **self.detail}
        if self.suggestion:
            data["suggestion"] = self.suggestion
        return data


# =====================
# Parse stage
# =====================

class ParseError(DocumentPipelineError):
    kind = "ParseError"
    suggestion = (
        "The document parser may be experiencing issues. Try again in a moment, "
        "or use a .txt file for direct processing."
    )


class UploadFailedError(ParseError):
    """The document could not be submitted to the parser."""

    kind = "UploadFailed"


class NoJobIdError(ParseError):
    """Upload succeeded but the response carried no job id."""

    kind = "NoJobId"


class JobFailedError(ParseError):
    """The parser reported an explicit ERROR status for the job."""

    kind = "JobFailed"

    def __init__(self, job_id: str, remote_message: Optional[str] = None):
        self.job_id = job_id
        self.remote_message = remote_message
        super().__init__(
            f"Document parsing failed: {remote_message or 'parser reported an error'}",
            {"job_id": job_id},
        )


class ParseTimeoutError(ParseError):
    """Attempt budget exhausted without a terminal status."""

    kind = "Timeout"

    def __init__(self, job_id: str, attempts: int, budget_seconds: float):
        self.job_id = job_id
        self.attempts = attempts
        self.budget_seconds = budget_seconds
        super().__init__(
            f"Document parsing timed out after {budget_seconds:g} seconds ({attempts} attempts)",
            {"job_id": job_id, "attempts": attempts},
        )


class ExtractionFailedError(ParseError):
    """Terminal success but no usable text could be produced."""

    kind = "ExtractionFailed"


class TransientParseError(ParseError):
    """The job disappeared mid-poll (not found); further polling is pointless."""

    kind = "Transient"

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(
            "Parse job not found. The job may have expired.",
            {"job_id": job_id},
        )


# =====================
# Summarization stage
# =====================

class SummarizationError(DocumentPipelineError):
    kind = "SummarizationError"
    suggestion = "The summarization service may be unavailable. Try again in a moment."


class AllModelsFailedError(SummarizationError):
    """Every candidate model and the REST fallback failed."""

    kind = "AllModelsFailed"

    def __init__(self, message: str, attempts: Optional[List[Any]] = None):
        self.attempts = attempts or []
        super().__init__(message, {"models_tried": [a.model for a in self.attempts]})


class UpstreamError(SummarizationError):
    """A non-availability failure (auth, quota, safety block...) from the backend."""

    kind = "UpstreamError"

    def __init__(self, model: str, cause: BaseException):
        self.model = model
        self.cause = cause
        super().__init__(
            f"Summarization failed on model {model}: {cause}",
            {"model": model},
        )
