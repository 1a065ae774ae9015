import asyncio
import json
from dataclasses import replace

import aiohttp
import pytest

from core.errors import (
    UploadFailedError,
    NoJobIdError,
    JobFailedError,
    ParseTimeoutError,
    ExtractionFailedError,
    TransientParseError,
)
from text_extractor.orchestrator import ParseOrchestrator, is_plain_text, read_text_file
from text_extractor.schemas import ExtractionSource
from tests.fakes import FakeParserClient, not_found, server_error

PENDING = {"status": "PENDING"}
SUCCESS_EMPTY = {"status": "SUCCESS", "id": "job-123"}
LONG_TEXT = "Hemoglobin within normal range. Continue current medication. " * 3


def make(parser_config, fake_sleep, responses=None, upload_response=None, config=None):
    config = config or parser_config
    client = FakeParserClient(config, upload_response=upload_response, responses=responses)
    return client, ParseOrchestrator(client, config, sleep=fake_sleep)


# =====================
# Polling
# =====================

@pytest.mark.asyncio
async def test_success_after_pending_polls(parser_config, fake_sleep, sleeps):
    status = parser_config.status_path
    client, orchestrator = make(parser_config, fake_sleep, {
        status: [PENDING, PENDING, {"status": "SUCCESS", "markdown": "# Results"}],
    })

    result = await orchestrator.parse(b"%PDF", "labs.pdf")

    assert result.text == "# Results"
    assert result.source is ExtractionSource.STATUS_FIELD
    assert result.field_path == "markdown"
    assert result.job_id == "job-123"
    assert result.poll_attempts == 3
    assert client.count(status) == 3
    assert sleeps == [2.0, 2.0, 2.0]
    assert client.submitted == [(b"%PDF", "labs.pdf")]


@pytest.mark.asyncio
async def test_status_is_case_insensitive(parser_config, fake_sleep):
    client, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [{"status": "success", "text": "lowercase ok"}],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == "lowercase ok"


@pytest.mark.asyncio
async def test_timeout_after_attempt_budget(parser_config, fake_sleep, sleeps):
    status = parser_config.status_path
    client, orchestrator = make(parser_config, fake_sleep, {status: [PENDING]})

    with pytest.raises(ParseTimeoutError) as exc_info:
        await orchestrator.parse(b"doc", "a.pdf")

    assert client.count(status) == parser_config.max_poll_attempts
    assert len(sleeps) == parser_config.max_poll_attempts
    assert exc_info.value.kind == "Timeout"
    assert exc_info.value.attempts == 5
    assert "10 seconds" in exc_info.value.message


@pytest.mark.asyncio
async def test_error_status_is_terminal(parser_config, fake_sleep):
    status = parser_config.status_path
    client, orchestrator = make(parser_config, fake_sleep, {
        status: [PENDING, {"status": "ERROR", "error": "Unsupported file type"}, {"status": "SUCCESS", "text": "x"}],
    })

    with pytest.raises(JobFailedError) as exc_info:
        await orchestrator.parse(b"doc", "a.xyz")

    assert client.count(status) == 2
    assert exc_info.value.kind == "JobFailed"
    assert "Unsupported file type" in exc_info.value.message
    assert exc_info.value.to_dict()["job_id"] == "job-123"


@pytest.mark.asyncio
async def test_error_status_reads_message_field(parser_config, fake_sleep):
    _, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [{"status": "ERROR", "message": "Corrupted PDF"}],
    })

    with pytest.raises(JobFailedError, match="Corrupted PDF"):
        await orchestrator.parse(b"doc", "a.pdf")


@pytest.mark.asyncio
async def test_job_not_found_is_transient(parser_config, fake_sleep):
    status = parser_config.status_path
    client, orchestrator = make(parser_config, fake_sleep, {status: [not_found()]})

    with pytest.raises(TransientParseError) as exc_info:
        await orchestrator.parse(b"doc", "a.pdf")

    assert client.count(status) == 1
    assert exc_info.value.kind == "Transient"
    assert "expired" in exc_info.value.message


@pytest.mark.asyncio
async def test_poll_errors_are_retried(parser_config, fake_sleep):
    status = parser_config.status_path
    client, orchestrator = make(parser_config, fake_sleep, {
        status: [server_error(), aiohttp.ClientConnectionError("reset"), {"status": "SUCCESS", "text": "done"}],
        parser_config.legacy_status_path: [server_error()],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == "done"
    assert result.poll_attempts == 3
    assert client.count(status) == 3


@pytest.mark.asyncio
async def test_unknown_status_keeps_polling(parser_config, fake_sleep):
    client, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [{"status": "PARTIAL_SUCCESS"}, "not json", {"status": "SUCCESS", "content": "ok"}],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == "ok"
    assert result.poll_attempts == 3


@pytest.mark.asyncio
async def test_legacy_status_path_fallback(parser_config, fake_sleep):
    client, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [not_found()],
        parser_config.legacy_status_path: [{"status": "SUCCESS", "markdown": "legacy"}],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == "legacy"
    assert client.calls[:2] == [parser_config.status_path, parser_config.legacy_status_path]


@pytest.mark.asyncio
async def test_cancellation_propagates(parser_config):
    async def cancelled_sleep(seconds):
        raise asyncio.CancelledError()

    client = FakeParserClient(parser_config, responses={parser_config.status_path: [PENDING]})
    orchestrator = ParseOrchestrator(client, parser_config, sleep=cancelled_sleep)

    with pytest.raises(asyncio.CancelledError):
        await orchestrator.parse(b"doc", "a.pdf")

    assert client.calls == []


# =====================
# Submission
# =====================

@pytest.mark.asyncio
async def test_missing_job_id(parser_config, fake_sleep):
    client, orchestrator = make(parser_config, fake_sleep, upload_response={"status": "PENDING"})

    with pytest.raises(NoJobIdError) as exc_info:
        await orchestrator.parse(b"doc", "a.pdf")

    assert client.calls == []
    assert exc_info.value.kind == "NoJobId"


@pytest.mark.asyncio
async def test_job_id_alias_field(parser_config, fake_sleep):
    client, orchestrator = make(
        parser_config,
        fake_sleep,
        {parser_config.status_path: [{"status": "SUCCESS", "text": "ok"}]},
        upload_response={"job_id": "alt-7"},
    )

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.job_id == "alt-7"
    assert client.job_ids == ["alt-7"]


@pytest.mark.asyncio
async def test_upload_failure(parser_config, fake_sleep):
    client, orchestrator = make(parser_config, fake_sleep, upload_response=server_error("/upload"))

    with pytest.raises(UploadFailedError) as exc_info:
        await orchestrator.parse(b"doc", "a.pdf")

    assert exc_info.value.kind == "UploadFailed"
    assert client.calls == []


# =====================
# Result resolution
# =====================

@pytest.mark.asyncio
async def test_result_endpoints_in_order(parser_config, fake_sleep):
    paths = parser_config.result_paths
    client, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [SUCCESS_EMPTY],
        paths[1]: [{"pages": 3}],
        paths[2]: [{"markdown": "from endpoint"}],
        paths[3]: [{"markdown": "never read"}],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == "from endpoint"
    assert result.source is ExtractionSource.RESULT_ENDPOINT
    assert [p for p in client.calls if p in paths] == list(paths[:3])


@pytest.mark.asyncio
async def test_plain_string_result_endpoint(parser_config, fake_sleep):
    paths = parser_config.result_paths
    _, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [SUCCESS_EMPTY],
        paths[0]: ["# Raw markdown body"],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == "# Raw markdown body"
    assert result.field_path == "$"


@pytest.mark.asyncio
async def test_status_refetch_after_result_endpoints(parser_config, fake_sleep):
    status = parser_config.status_path
    client, orchestrator = make(parser_config, fake_sleep, {
        status: [PENDING, SUCCESS_EMPTY, {"status": "SUCCESS", "result": {"text": "late text"}}],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == "late text"
    assert result.source is ExtractionSource.STATUS_REFETCH
    assert client.count(status) == 3
    for path in parser_config.result_paths:
        assert client.count(path) == 1


@pytest.mark.asyncio
async def test_status_refetch_legacy_fallback(parser_config, fake_sleep):
    status = parser_config.status_path
    legacy = parser_config.legacy_status_path
    client, orchestrator = make(parser_config, fake_sleep, {
        status: [SUCCESS_EMPTY, server_error()],
        legacy: [{"status": "SUCCESS", "markdown": "legacy late"}],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == "legacy late"
    assert result.source is ExtractionSource.STATUS_REFETCH
    assert client.count(status) == 2
    assert client.count(legacy) == 1
    assert client.calls[-2:] == [status, legacy]


@pytest.mark.asyncio
async def test_unstructured_extraction(parser_config, fake_sleep):
    _, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [{"status": "SUCCESS", "output": {"pages": [LONG_TEXT]}}],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == LONG_TEXT
    assert result.source is ExtractionSource.UNSTRUCTURED
    assert result.field_path == "output.pages[0]"


@pytest.mark.asyncio
async def test_unstructured_uses_first_payload_when_refetch_fails(parser_config, fake_sleep):
    _, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [{"status": "SUCCESS", "blob": LONG_TEXT}, server_error()],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == LONG_TEXT
    assert result.source is ExtractionSource.UNSTRUCTURED


@pytest.mark.asyncio
async def test_unstructured_searches_result_endpoint_body(parser_config, fake_sleep):
    paths = parser_config.result_paths
    _, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [SUCCESS_EMPTY],
        paths[0]: [{"pages": [{"md": LONG_TEXT}]}],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == LONG_TEXT
    assert result.source is ExtractionSource.UNSTRUCTURED
    assert result.field_path == "pages[0].md"


@pytest.mark.asyncio
async def test_result_endpoint_body_preferred_over_status(parser_config, fake_sleep):
    paths = parser_config.result_paths
    status_text = "Status note that is long enough to qualify. " * 3
    _, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [{"status": "SUCCESS", "note": status_text}],
        paths[1]: [{"pages": [{"md": LONG_TEXT}]}],
        paths[2]: [{"pages": [{"md": "second endpoint is ignored " * 10}]}],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.text == LONG_TEXT


@pytest.mark.asyncio
async def test_degraded_serializes_result_endpoint_body(parser_config, fake_sleep):
    paths = parser_config.result_paths
    _, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [SUCCESS_EMPTY],
        paths[2]: [{"pages": 3, "job_id": "job-123"}],
    })

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.source is ExtractionSource.DEGRADED
    assert json.loads(result.text) == {"pages": 3, "job_id": "job-123"}


@pytest.mark.asyncio
async def test_degraded_serializes_payload(parser_config, fake_sleep):
    _, orchestrator = make(parser_config, fake_sleep, {parser_config.status_path: [SUCCESS_EMPTY]})

    result = await orchestrator.parse(b"doc", "a.pdf")

    assert result.source is ExtractionSource.DEGRADED
    assert json.loads(result.text) == SUCCESS_EMPTY


@pytest.mark.asyncio
async def test_blank_text_is_extraction_failure(parser_config, fake_sleep):
    _, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [{"status": "SUCCESS", "blob": " " * 200}],
    })

    with pytest.raises(ExtractionFailedError):
        await orchestrator.parse(b"doc", "a.pdf")


@pytest.mark.asyncio
async def test_settle_delay_before_resolution(parser_config, fake_sleep, sleeps):
    config = replace(parser_config, settle_delay=1.0)
    _, orchestrator = make(
        parser_config, fake_sleep, {config.status_path: [{"status": "SUCCESS", "text": "t"}]}, config=config
    )

    await orchestrator.parse(b"doc", "a.pdf")

    assert sleeps == [2.0, 1.0]


# =====================
# Plain-text shortcut
# =====================

@pytest.mark.asyncio
async def test_text_file_skips_parser(parser_config, fake_sleep):
    client, orchestrator = make(parser_config, fake_sleep)

    result = await orchestrator.extract("Blood pressure 120/80".encode(), "notes.TXT")

    assert result.text == "Blood pressure 120/80"
    assert result.source is ExtractionSource.DIRECT_TEXT
    assert client.submitted == []
    assert client.calls == []


@pytest.mark.asyncio
async def test_empty_text_file(parser_config, fake_sleep):
    _, orchestrator = make(parser_config, fake_sleep)

    with pytest.raises(ExtractionFailedError):
        await orchestrator.extract(b"  \n", "empty.txt")


@pytest.mark.asyncio
async def test_non_text_file_goes_to_parser(parser_config, fake_sleep):
    client, orchestrator = make(parser_config, fake_sleep, {
        parser_config.status_path: [{"status": "SUCCESS", "markdown": "parsed"}],
    })

    result = await orchestrator.extract(b"%PDF", "scan.pdf", "application/pdf")

    assert result.source is ExtractionSource.STATUS_FIELD
    assert len(client.submitted) == 1


def test_is_plain_text():
    assert is_plain_text("a.txt")
    assert is_plain_text("upload", "text/plain; charset=utf-8")
    assert not is_plain_text("a.pdf", "application/pdf")
    assert not is_plain_text("")


def test_read_text_file_strips_bom():
    assert read_text_file(b"\xef\xbb\xbfhola") == "hola"
