import pytest

from core.errors import JobFailedError, UpstreamError
from documents.pipeline import DocumentPipeline
from summarization.summarizer import SummarizationClient
from text_extractor.orchestrator import ParseOrchestrator
from text_extractor.schemas import ExtractionSource
from tests.fakes import FakeLLMClient, FakeParserClient
from google.api_core import exceptions as google_exceptions


def make(parser_config, fake_sleep, parser_responses=None, llm_outcomes=None):
    parser = FakeParserClient(parser_config, responses=parser_responses)
    llm = FakeLLMClient(llm_outcomes)
    pipeline = DocumentPipeline(
        ParseOrchestrator(parser, parser_config, sleep=fake_sleep),
        SummarizationClient(llm, candidate_models=["model-a"], rest_model="model-rest"),
    )
    return parser, llm, pipeline


@pytest.mark.asyncio
async def test_text_document_end_to_end(parser_config, fake_sleep):
    parser, llm, pipeline = make(parser_config, fake_sleep, llm_outcomes={("sdk", "model-a"): "Resumen"})

    result = await pipeline.process(b"Take 10mg daily.", "instructions.txt", "es")

    assert result.summary == "Resumen"
    assert result.target_language == "Spanish"
    assert result.original_language == "English"
    assert result.model == "model-a"
    assert result.extraction.source is ExtractionSource.DIRECT_TEXT
    assert parser.submitted == []
    assert "Take 10mg daily." in llm.calls[0][2]
    assert "Spanish" in llm.calls[0][2]


@pytest.mark.asyncio
async def test_parsed_document_end_to_end(parser_config, fake_sleep):
    parser, llm, pipeline = make(
        parser_config,
        fake_sleep,
        parser_responses={parser_config.status_path: [{"status": "SUCCESS", "markdown": "# Discharge"}]},
        llm_outcomes={("sdk", "model-a"): "Résumé"},
    )

    result = await pipeline.process(b"%PDF", "discharge.pdf", "French", "application/pdf")

    assert result.summary == "Résumé"
    assert result.extraction.job_id == "job-123"
    assert "# Discharge" in llm.calls[0][2]


@pytest.mark.asyncio
async def test_parse_failure_skips_summarization(parser_config, fake_sleep):
    _, llm, pipeline = make(
        parser_config,
        fake_sleep,
        parser_responses={parser_config.status_path: [{"status": "ERROR", "error": "bad file"}]},
    )

    with pytest.raises(JobFailedError):
        await pipeline.process(b"%PDF", "a.pdf", "Spanish")

    assert llm.calls == []


@pytest.mark.asyncio
async def test_summarization_failure_propagates(parser_config, fake_sleep):
    _, _, pipeline = make(
        parser_config,
        fake_sleep,
        llm_outcomes={("sdk", "model-a"): google_exceptions.PermissionDenied("API key not valid")},
    )

    with pytest.raises(UpstreamError):
        await pipeline.process(b"notes", "a.txt", "Spanish")


@pytest.mark.asyncio
async def test_process_file_reads_from_disk(parser_config, fake_sleep, tmp_path):
    path = tmp_path / "upload.txt"
    path.write_bytes(b"Blood glucose 95")
    _, llm, pipeline = make(parser_config, fake_sleep, llm_outcomes={("sdk", "model-a"): "ok"})

    result = await pipeline.process_file(path, "labs.txt", "Korean")

    assert result.target_language == "Korean"
    assert "Blood glucose 95" in llm.calls[0][2]
