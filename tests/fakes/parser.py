"""
Fake parser transport.

Responses are scripted per path template. Each entry is a list of outcomes
consumed in order; the last outcome repeats. An outcome that is an exception
is raised. Paths with no script answer 404.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from text_extractor.parser_client import ParserConfig, ParserHTTPError


def not_found(path: str = "/job") -> ParserHTTPError:
    return ParserHTTPError(404, f"http://parser.test{path}", {"detail": "Not Found"})


def server_error(path: str = "/job") -> ParserHTTPError:
    return ParserHTTPError(500, f"http://parser.test{path}", {"detail": "Internal Server Error"})


class FakeParserClient:
    def __init__(
        self,
        config: ParserConfig,
        upload_response: Any = None,
        responses: Optional[Dict[str, List[Any]]] = None,
    ):
        self.config = config
        self.upload_response = {"id": "job-123"} if upload_response is None else upload_response
        self.responses = {path: list(outcomes) for path, outcomes in (responses or {}).items()}
        self.submitted: List[tuple] = []
        self.calls: List[str] = []
        self.job_ids: List[str] = []
        self.closed = False

    async def submit(self, file_bytes: bytes, file_name: str) -> Any:
        self.submitted.append((file_bytes, file_name))
        if isinstance(self.upload_response, BaseException):
            raise self.upload_response
        return self.upload_response

    async def get(self, path: str, job_id: str, timeout: Optional[int] = None) -> Any:
        self.calls.append(path)
        self.job_ids.append(job_id)
        outcomes = self.responses.get(path)
        if not outcomes:
            raise not_found(path.format(job_id=job_id))
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True

    def count(self, path: str) -> int:
        return self.calls.count(path)
