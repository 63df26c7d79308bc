"""Tertiary provider: a local Ollama model, bounded by a hard timeout."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from healthweave.exceptions import LocalModelUnreachableError, ProviderTimeoutError
from healthweave.providers.protocols import chat_completion

if TYPE_CHECKING:
    from healthweave.core.config import LocalProviderConfig

log = logging.getLogger(__name__)

_CONNECTION_ERROR_NAMES = {"APIConnectionError", "ConnectError", "ClientConnectorError"}
_CONNECTION_MARKERS = ("connection refused", "econnrefused", "cannot connect", "failed to connect")
_TIMEOUT_ERROR_NAMES = {"Timeout", "ReadTimeout", "TimeoutError"}


def _is_connection_error(exc: BaseException) -> bool:
    if isinstance(exc, ConnectionError) or type(exc).__name__ in _CONNECTION_ERROR_NAMES:
        return True
    lowered = str(exc).lower()
    return any(marker in lowered for marker in _CONNECTION_MARKERS)


class OllamaProvider:
    """Calls ``ollama_chat/<model>`` at ``base_url``.

    Timeouts become :class:`ProviderTimeoutError` and refused connections
    :class:`LocalModelUnreachableError`, each with an actionable message.
    """

    name = "tertiary"

    def __init__(self, config: LocalProviderConfig) -> None:
        self._config = config

    @property
    def identifier(self) -> str:
        return f"ollama/{self._config.model}"

    def is_configured(self) -> bool:
        return self._config.enabled

    async def invoke(self, system_instruction: str, user_message: str) -> tuple[str, str]:
        budget = self._config.timeout_seconds
        try:
            text, reported = await asyncio.wait_for(
                chat_completion(
                    f"ollama_chat/{self._config.model}",
                    system_instruction,
                    user_message,
                    api_base=self._config.base_url,
                    temperature=self._config.temperature,
                    top_p=self._config.top_p,
                ),
                timeout=budget,
            )
        except asyncio.TimeoutError as exc:
            raise ProviderTimeoutError(
                f"Local model processing exceeded {budget:.0f}s. "
                "Try analyzing fewer documents at once.",
                provider=self.name,
            ) from exc
        except Exception as exc:
            if type(exc).__name__ in _TIMEOUT_ERROR_NAMES:
                raise ProviderTimeoutError(
                    f"Local model processing exceeded {budget:.0f}s. "
                    "Try analyzing fewer documents at once.",
                    provider=self.name,
                ) from exc
            if _is_connection_error(exc):
                raise LocalModelUnreachableError(
                    f"Ollama is not running at {self._config.base_url}. "
                    f"Install from https://ollama.ai, then run: ollama serve && "
                    f"ollama pull {self._config.model}",
                    provider=self.name,
                ) from exc
            raise
        return text, f"ollama/{reported}"
