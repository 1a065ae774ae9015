"""
Schemas for Text Extraction Module

Tracks a remote parse job and describes where its text was found.
"""

from enum import Enum
from typing import Optional, Any
from dataclasses import dataclass, field
from datetime import datetime, timezone


class JobStatus(str, Enum):
    """Normalized status of a remote parse job."""
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"
    UNKNOWN = "unknown"

    @classmethod
    def from_remote(cls, value: Any) -> "JobStatus":
        """Case-insensitive mapping of the remote status string; anything else is UNKNOWN."""
        if not isinstance(value, str):
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCESS, JobStatus.ERROR)


class ExtractionSource(str, Enum):
    """Which step of the resolution chain produced the text."""
    DIRECT_TEXT = "direct_text"              # plain-text upload, parser bypassed
    STATUS_FIELD = "status_field"            # recognized field in the SUCCESS status payload
    RESULT_ENDPOINT = "result_endpoint"      # recognized field from an alternate result endpoint
    STATUS_REFETCH = "status_refetch"        # recognized field after re-fetching status
    UNSTRUCTURED = "unstructured"            # first long string found anywhere in the payload
    DEGRADED = "degraded"                    # whole payload serialized as text


@dataclass
class ParseJob:
    """
    One submission to the remote parser.

    Only the poll loop mutates it; it is discarded once a terminal
    status is reached or the attempt budget runs out.
    """
    id: str
    file_name: str
    status: JobStatus = JobStatus.PENDING
    elapsed_attempts: int = 0
    submitted_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


@dataclass
class ResolvedField:
    """A text value located in a payload, with the path it was found under."""
    text: str
    path: str


@dataclass
class ExtractionResult:
    """Resolved text of a document plus provenance for logging/API responses."""
    text: str
    source: ExtractionSource
    file_name: str
    job_id: Optional[str] = None
    field_path: Optional[str] = None
    poll_attempts: int = 0

    @property
    def char_count(self) -> int:
        return len(self.text)

    @property
    def word_count(self) -> int:
        return len(self.text.split())
