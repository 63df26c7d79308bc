"""Primary provider: Anthropic models hosted on AWS Bedrock."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from healthweave.providers.protocols import chat_completion

if TYPE_CHECKING:
    from healthweave.core.config import PrimaryProviderConfig

log = logging.getLogger(__name__)

# Message fragments an emulator returns for services it does not implement.
_UNAVAILABLE_MARKERS = ("bedrock-runtime", "not yet been emulated")


def is_emulator_unavailable(exc: BaseException, endpoint: str) -> bool:
    """True when ``exc`` means the configured emulator cannot serve Bedrock.

    Only meaningful with a custom endpoint; against real AWS every error is
    a genuine rejection and must surface.
    """
    if not endpoint:
        return False
    if type(exc).__name__ == "InternalFailure" or getattr(exc, "code", None) == "InternalFailure":
        return True
    if getattr(exc, "status_code", None) == 501:
        return True
    message = str(exc)
    if "InternalFailure" in message:
        return True
    lowered = message.lower()
    return any(marker in lowered for marker in _UNAVAILABLE_MARKERS)


class BedrockProvider:
    """Calls ``bedrock/<model_id>`` through litellm."""

    name = "primary"

    def __init__(self, config: PrimaryProviderConfig) -> None:
        self._config = config

    @property
    def identifier(self) -> str:
        return f"bedrock/{self._config.model_id}"

    @property
    def endpoint(self) -> str:
        return self._config.aws_endpoint

    def is_configured(self) -> bool:
        return bool(self._config.model_id)

    def is_unavailable(self, exc: BaseException) -> bool:
        return is_emulator_unavailable(exc, self._config.aws_endpoint)

    async def invoke(self, system_instruction: str, user_message: str) -> tuple[str, str]:
        params: dict[str, Any] = {
            "max_tokens": self._config.max_tokens,
            "aws_region_name": self._config.aws_region,
        }
        if self._config.aws_endpoint:
            params["aws_bedrock_runtime_endpoint"] = self._config.aws_endpoint
        if self._config.timeout_seconds is not None:
            params["timeout"] = self._config.timeout_seconds
        text, reported = await chat_completion(self.identifier, system_instruction, user_message, **params)
        return text, f"bedrock/{reported}"
