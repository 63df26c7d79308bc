"""Tests for AnalysisService: prompt -> chain -> parser -> store -> audit."""

from __future__ import annotations

import json

import pytest

from healthweave.core.config import ExtractionConfig
from healthweave.exceptions import AllProvidersFailedError, ProviderRejectedError
from healthweave.extraction.report_parser import ReportParser
from healthweave.hooks import audit_hook
from healthweave.hooks.audit_hook import AuditHook
from healthweave.persistence.memory_backend import MemoryPersistenceBackend
from healthweave.providers.chain import ProviderChain, ProviderDescriptor
from healthweave.services.analysis_service import AnalysisService
from healthweave.services.report_store import ReportStore
from tests.fakes.fake_provider import FakeProvider


def _actions(backend: MemoryPersistenceBackend) -> list[str]:
    return [json.loads(backend.load(key))["action"] for key in backend.list_keys()]


@pytest.fixture
def audit_backend() -> MemoryPersistenceBackend:
    return MemoryPersistenceBackend()


@pytest.fixture
def store() -> ReportStore:
    return ReportStore(MemoryPersistenceBackend())


def _service(provider: FakeProvider, store: ReportStore, audit_backend: MemoryPersistenceBackend, falls_back=None):
    descriptor = ProviderDescriptor(provider) if falls_back is None else ProviderDescriptor(provider, falls_back)
    return AnalysisService(
        ProviderChain([descriptor]),
        ReportParser(ExtractionConfig()),
        store=store,
        audit=AuditHook(backend=audit_backend),
    )


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_report_parsed_and_stored(self, sample_documents, sample_markdown, store, audit_backend):
        provider = FakeProvider("primary", "bedrock/test-model", response=sample_markdown)
        service = _service(provider, store, audit_backend)

        report = await service.analyze(sample_documents, "58yo", requester_id="user-1")

        assert report.provider_identifier == "bedrock/test-model"
        assert report.requester_id == "user-1"
        assert report.document_names == ["lab_panel.txt", "abdomen_ultrasound.txt"]
        assert len(report.key_findings) == 3
        assert store.get(report.report_id, "user-1") == report

    @pytest.mark.asyncio
    async def test_prompt_contains_documents_and_context(self, sample_documents, store, audit_backend):
        provider = FakeProvider("primary", "bedrock/test-model")
        await _service(provider, store, audit_backend).analyze(sample_documents, "58yo with fatigue")

        system, user = provider.calls[0]
        assert "## Key Findings" in system
        assert "ALT 45 U/L (7-40)" in user
        assert "58yo with fatigue" in user

    @pytest.mark.asyncio
    async def test_audit_trail(self, sample_documents, store, audit_backend):
        provider = FakeProvider("primary", "bedrock/test-model")
        await _service(provider, store, audit_backend).analyze(sample_documents)

        actions = _actions(audit_backend)
        assert actions.count(audit_hook.DOCUMENT_UPLOAD) == 2
        assert actions.count(audit_hook.ANALYSIS_COMPLETE) == 1

    @pytest.mark.asyncio
    async def test_malformed_output_still_gives_valid_report(self, sample_documents, store, audit_backend):
        provider = FakeProvider("primary", "bedrock/test-model", response="???")
        report = await _service(provider, store, audit_backend).analyze(sample_documents)
        assert report.key_findings
        assert report.recommendations

    @pytest.mark.asyncio
    async def test_no_documents(self, store, audit_backend):
        service = _service(FakeProvider("primary", "bedrock/m"), store, audit_backend)
        with pytest.raises(ValueError, match="At least one document"):
            await service.analyze([])

    @pytest.mark.asyncio
    async def test_without_store(self, sample_documents):
        service = AnalysisService(
            ProviderChain([ProviderDescriptor(FakeProvider("primary", "bedrock/m"))]),
            ReportParser(ExtractionConfig()),
        )
        report = await service.analyze(sample_documents)
        assert report.summary


class TestFailures:
    @pytest.mark.asyncio
    async def test_domain_error_reraised_and_audited(self, sample_documents, store, audit_backend):
        provider = FakeProvider("primary", "bedrock/m", error=RuntimeError("down"))
        service = _service(provider, store, audit_backend)

        with pytest.raises(AllProvidersFailedError):
            await service.analyze(sample_documents)

        assert audit_hook.ANALYSIS_FAILED in _actions(audit_backend)
        assert store.list_for("anonymous") == []

    @pytest.mark.asyncio
    async def test_rejected_error_wrapped(self, sample_documents, store, audit_backend):
        provider = FakeProvider("primary", "bedrock/m", error=RuntimeError("ValidationException"))
        service = _service(provider, store, audit_backend, falls_back=lambda exc: False)

        with pytest.raises(ProviderRejectedError, match="ValidationException") as exc_info:
            await service.analyze(sample_documents)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert audit_hook.ANALYSIS_FAILED in _actions(audit_backend)
