"""Tests for the healthweave CLI."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from healthweave.cli import main as cli_main
from healthweave.core.config import ExtractionConfig
from healthweave.extraction.report_parser import ReportParser
from healthweave.providers.chain import ProviderChain, ProviderDescriptor
from healthweave.services.analysis_service import AnalysisService
from tests.fakes.fake_provider import FakeProvider

runner = CliRunner()


@pytest.fixture
def patch_service(monkeypatch, sample_markdown):
    def _patch(provider: FakeProvider | None = None) -> FakeProvider:
        provider = provider or FakeProvider("primary", "bedrock/test-model", response=sample_markdown)
        service = AnalysisService(ProviderChain([ProviderDescriptor(provider)]), ReportParser(ExtractionConfig()))
        monkeypatch.setattr(cli_main, "_build_analysis_service", lambda settings: service)
        monkeypatch.setattr(cli_main, "setup_logging", lambda config: None)
        return provider

    return _patch


class TestAnalyzeCommand:
    def test_writes_report_json(self, patch_service, tmp_path):
        provider = patch_service()
        doc = tmp_path / "lab_panel.txt"
        doc.write_text("ALT 45 U/L (7-40)", encoding="utf-8")
        out = tmp_path / "report.json"

        result = runner.invoke(cli_main.app, ["analyze", str(doc), "--context", "58yo", "--output", str(out)])

        assert result.exit_code == 0, result.output
        assert "Key Findings" in result.output
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert payload["provider_identifier"] == "bedrock/test-model"
        assert payload["document_names"] == ["lab_panel.txt"]
        assert "ALT 45 U/L (7-40)" in provider.calls[0][1]

    def test_provider_failure_exits_nonzero(self, patch_service, tmp_path):
        patch_service(FakeProvider("primary", "bedrock/m", error=RuntimeError("down")))
        doc = tmp_path / "note.txt"
        doc.write_text("Visit note", encoding="utf-8")

        result = runner.invoke(cli_main.app, ["analyze", str(doc)])

        assert result.exit_code == 1
        assert "Analysis failed" in result.output

    def test_missing_file(self, patch_service, tmp_path):
        patch_service()
        result = runner.invoke(cli_main.app, ["analyze", str(tmp_path / "nope.txt")])
        assert result.exit_code != 0


class TestRenderCommand:
    def test_renders_pdf(self, sample_report, tmp_path):
        report_file = tmp_path / "report.json"
        report_file.write_text(sample_report.model_dump_json(), encoding="utf-8")

        result = runner.invoke(cli_main.app, ["render", str(report_file)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "report.pdf").read_bytes().startswith(b"%PDF-")


class TestServeCommand:
    def test_runs_uvicorn_with_configured_port(self, monkeypatch):
        calls = []
        monkeypatch.setenv("HEALTHWEAVE_API_PORT", "4123")
        monkeypatch.setattr("uvicorn.run", lambda target, **kwargs: calls.append((target, kwargs)))

        result = runner.invoke(cli_main.app, ["serve"])

        assert result.exit_code == 0, result.output
        assert calls == [("healthweave.api.app:app", {"host": "0.0.0.0", "port": 4123, "reload": False})]

    def test_port_option_overrides_settings(self, monkeypatch):
        calls = []
        monkeypatch.setattr("uvicorn.run", lambda target, **kwargs: calls.append(kwargs))

        result = runner.invoke(cli_main.app, ["serve", "--host", "127.0.0.1", "--port", "9000"])

        assert result.exit_code == 0, result.output
        assert calls[0]["host"] == "127.0.0.1"
        assert calls[0]["port"] == 9000
