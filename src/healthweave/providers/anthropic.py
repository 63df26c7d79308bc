"""Secondary provider: the Anthropic API, used when Bedrock is unavailable."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from healthweave.providers.protocols import chat_completion

if TYPE_CHECKING:
    from healthweave.core.config import SecondaryProviderConfig


class AnthropicProvider:
    """Calls ``anthropic/<model>``. Skipped when no API key is set."""

    name = "secondary"

    def __init__(self, config: SecondaryProviderConfig) -> None:
        self._config = config

    @property
    def identifier(self) -> str:
        return f"anthropic/{self._config.model}"

    def is_configured(self) -> bool:
        return bool(self._config.api_key)

    async def invoke(self, system_instruction: str, user_message: str) -> tuple[str, str]:
        params: dict[str, Any] = {
            "max_tokens": self._config.max_tokens,
            "api_key": self._config.api_key,
        }
        if self._config.timeout_seconds is not None:
            params["timeout"] = self._config.timeout_seconds
        text, reported = await chat_completion(self.identifier, system_instruction, user_message, **params)
        return text, f"anthropic/{reported}"
