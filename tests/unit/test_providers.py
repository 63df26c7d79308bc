"""Tests for concrete providers with mocked litellm.acompletion."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from healthweave.core.config import (
    AppSettings,
    LocalProviderConfig,
    PrimaryProviderConfig,
    SecondaryProviderConfig,
)
from healthweave.exceptions import LocalModelUnreachableError, ProviderTimeoutError
from healthweave.providers.anthropic import AnthropicProvider
from healthweave.providers.bedrock import BedrockProvider, is_emulator_unavailable
from healthweave.providers.factory import create_provider_chain
from healthweave.providers.ollama import OllamaProvider
from healthweave.providers.protocols import IModelProvider, chat_completion
from tests.fakes.fake_provider import InternalFailure

_EMULATOR = "http://localhost:4566"


def _mock_response(
    content: str | None = "## Executive Summary\nok",
    finish_reason: str = "stop",
    model: str | None = None,
) -> MagicMock:
    """Build a mock LiteLLM response object."""
    message = MagicMock()
    message.content = content

    choice = MagicMock()
    choice.message = message
    choice.finish_reason = finish_reason

    response = MagicMock()
    response.choices = [choice]
    response.model = model
    return response


class TestChatCompletion:
    @pytest.mark.asyncio
    async def test_messages_and_no_retries(self):
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("answer")
            result = await chat_completion("anthropic/m", "system text", "user text", max_tokens=10)

        assert result == ("answer", "m")
        kwargs = mock_acomp.call_args.kwargs
        assert kwargs["model"] == "anthropic/m"
        assert kwargs["num_retries"] == 0
        assert kwargs["max_tokens"] == 10
        assert kwargs["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ]

    @pytest.mark.asyncio
    async def test_none_content_becomes_empty(self):
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response(None)
            assert await chat_completion("m", "s", "u") == ("", "m")

    @pytest.mark.asyncio
    async def test_reported_model_returned_without_route(self):
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("answer", model="claude-3-5-sonnet-20241022")
            assert await chat_completion("anthropic/claude-latest", "s", "u") == (
                "answer",
                "claude-3-5-sonnet-20241022",
            )

        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("answer", model="ollama_chat/llama3.2:latest")
            assert await chat_completion("ollama_chat/llama3.2", "s", "u") == ("answer", "llama3.2:latest")

    @pytest.mark.asyncio
    async def test_truncated_answer_logs_warning(self, caplog):
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("partial", finish_reason="length")
            with caplog.at_level("WARNING", logger="healthweave.providers.protocols"):
                await chat_completion("m", "s", "u")
        assert any("max tokens" in r.getMessage() for r in caplog.records)


class TestBedrockProvider:
    def test_satisfies_protocol(self):
        assert isinstance(BedrockProvider(PrimaryProviderConfig()), IModelProvider)

    @pytest.mark.asyncio
    async def test_emulator_endpoint_passed(self):
        provider = BedrockProvider(PrimaryProviderConfig(model_id="claude-x", aws_endpoint=_EMULATOR))
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response()
            await provider.invoke("s", "u")
        kwargs = mock_acomp.call_args.kwargs
        assert kwargs["model"] == "bedrock/claude-x"
        assert kwargs["aws_bedrock_runtime_endpoint"] == _EMULATOR
        assert kwargs["aws_region_name"] == "us-east-1"
        assert "timeout" not in kwargs

    @pytest.mark.asyncio
    async def test_identifier_uses_reported_model(self):
        provider = BedrockProvider(PrimaryProviderConfig(model_id="claude-x"))
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("ok", model="anthropic.claude-x-v2:0")
            assert await provider.invoke("s", "u") == ("ok", "bedrock/anthropic.claude-x-v2:0")

    @pytest.mark.asyncio
    async def test_real_aws_has_no_endpoint_override(self):
        provider = BedrockProvider(PrimaryProviderConfig(model_id="claude-x", timeout_seconds=30))
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response()
            await provider.invoke("s", "u")
        kwargs = mock_acomp.call_args.kwargs
        assert "aws_bedrock_runtime_endpoint" not in kwargs
        assert kwargs["timeout"] == 30


class TestEmulatorClassification:
    def test_internal_failure_by_type(self):
        assert is_emulator_unavailable(InternalFailure(), _EMULATOR)

    def test_internal_failure_in_message(self):
        assert is_emulator_unavailable(RuntimeError("An error occurred (InternalFailure)"), _EMULATOR)

    def test_not_emulated_marker(self):
        assert is_emulator_unavailable(RuntimeError("Service has not yet been emulated"), _EMULATOR)

    def test_status_501(self):
        exc = RuntimeError("not implemented")
        exc.status_code = 501  # type: ignore[attr-defined]
        assert is_emulator_unavailable(exc, _EMULATOR)

    def test_without_endpoint_nothing_is_unavailable(self):
        assert not is_emulator_unavailable(InternalFailure(), "")

    def test_genuine_rejection(self):
        assert not is_emulator_unavailable(ValueError("ValidationException: bad input"), _EMULATOR)


class TestAnthropicProvider:
    def test_configured_only_with_key(self):
        assert not AnthropicProvider(SecondaryProviderConfig(api_key="")).is_configured()
        assert AnthropicProvider(SecondaryProviderConfig(api_key="sk-test")).is_configured()

    @pytest.mark.asyncio
    async def test_invoke(self):
        provider = AnthropicProvider(SecondaryProviderConfig(api_key="sk-test", model="claude-y"))
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("hello")
            assert await provider.invoke("s", "u") == ("hello", "anthropic/claude-y")
        kwargs = mock_acomp.call_args.kwargs
        assert kwargs["model"] == "anthropic/claude-y"
        assert kwargs["api_key"] == "sk-test"
        assert provider.identifier == "anthropic/claude-y"


class TestOllamaProvider:
    @pytest.mark.asyncio
    async def test_invoke_params(self):
        provider = OllamaProvider(LocalProviderConfig(model="llama3.2", base_url="http://ollama:11434"))
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("local")
            assert await provider.invoke("s", "u") == ("local", "ollama/llama3.2")
        kwargs = mock_acomp.call_args.kwargs
        assert kwargs["model"] == "ollama_chat/llama3.2"
        assert kwargs["api_base"] == "http://ollama:11434"
        assert kwargs["temperature"] == 0.7
        assert kwargs["top_p"] == 0.9
        assert provider.identifier == "ollama/llama3.2"

    @pytest.mark.asyncio
    async def test_timeout(self):
        provider = OllamaProvider(LocalProviderConfig(timeout_seconds=0.01))

        async def _slow(*args: Any, **kwargs: Any) -> MagicMock:
            await asyncio.sleep(1)
            return _mock_response()

        with patch("litellm.acompletion", new=_slow):
            with pytest.raises(ProviderTimeoutError, match="fewer documents"):
                await provider.invoke("s", "u")

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        provider = OllamaProvider(LocalProviderConfig(model="llama3.2"))
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.side_effect = ConnectionRefusedError("Connection refused")
            with pytest.raises(LocalModelUnreachableError, match="ollama pull llama3.2"):
                await provider.invoke("s", "u")

    @pytest.mark.asyncio
    async def test_other_errors_pass_through(self):
        provider = OllamaProvider(LocalProviderConfig())
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.side_effect = RuntimeError("model not found")
            with pytest.raises(RuntimeError, match="model not found"):
                await provider.invoke("s", "u")

    def test_disabled(self):
        assert not OllamaProvider(LocalProviderConfig(enabled=False)).is_configured()


class TestFactoryChain:
    def test_order(self, settings):
        chain = create_provider_chain(settings)
        assert [d.provider.name for d in chain.descriptors] == ["primary", "secondary", "tertiary"]

    @pytest.mark.asyncio
    async def test_emulated_primary_falls_back_to_anthropic(self):
        settings = AppSettings(
            primary=PrimaryProviderConfig(model_id="claude-x", aws_endpoint=_EMULATOR),
            secondary=SecondaryProviderConfig(api_key="sk-test", model="claude-y"),
            local=LocalProviderConfig(enabled=False),
        )

        async def _route(**kwargs: Any) -> MagicMock:
            if kwargs["model"].startswith("bedrock/"):
                raise InternalFailure()
            return _mock_response("from anthropic")

        with patch("litellm.acompletion", new=AsyncMock(side_effect=_route)):
            result = await create_provider_chain(settings).invoke("s", "u")

        assert result.provider_identifier == "anthropic/claude-y"
        assert result.raw_text == "from anthropic"

    @pytest.mark.asyncio
    async def test_real_primary_rejection_does_not_fall_back(self):
        settings = AppSettings(
            primary=PrimaryProviderConfig(model_id="claude-x"),
            secondary=SecondaryProviderConfig(api_key="sk-test"),
            local=LocalProviderConfig(enabled=False),
        )
        mock_acomp = AsyncMock(side_effect=InternalFailure())
        with patch("litellm.acompletion", new=mock_acomp):
            with pytest.raises(InternalFailure):
                await create_provider_chain(settings).invoke("s", "u")
        assert mock_acomp.await_count == 1
