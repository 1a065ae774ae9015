from __future__ import annotations

import os
import tempfile

# Must be set before any project module reads its config
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="doc_summarizer_test_"))
os.environ.setdefault("LLAMAPARSE_API_KEY", "test-parser-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")

from typing import List

import pytest

from text_extractor.parser_client import ParserConfig


@pytest.fixture()
def parser_config() -> ParserConfig:
    """Small attempt budget; sleeps are recorded, never awaited for real."""
    return ParserConfig(
        api_key="test-parser-key",
        base_url="http://parser.test",
        max_poll_attempts=5,
        poll_interval=2.0,
        settle_delay=0.0,
    )


@pytest.fixture()
def sleeps() -> List[float]:
    return []


@pytest.fixture()
def fake_sleep(sleeps):
    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return _sleep


@pytest.fixture()
def upload_dir() -> str:
    return os.environ["UPLOAD_DIR"]
