"""Build the provider chain from settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from healthweave.exceptions import LocalModelUnreachableError, ProviderTimeoutError
from healthweave.providers.anthropic import AnthropicProvider
from healthweave.providers.bedrock import BedrockProvider
from healthweave.providers.chain import ProviderChain, ProviderDescriptor, always
from healthweave.providers.ollama import OllamaProvider

if TYPE_CHECKING:
    from healthweave.core.config import AppSettings

log = logging.getLogger(__name__)


def _local_falls_back(exc: BaseException) -> bool:
    # Timeouts and a stopped daemon carry their own actionable message.
    return not isinstance(exc, (ProviderTimeoutError, LocalModelUnreachableError))


def create_provider_chain(settings: AppSettings) -> ProviderChain:
    """Primary Bedrock, then Anthropic API, then local Ollama."""
    primary = BedrockProvider(settings.primary)
    chain = ProviderChain(
        (
            ProviderDescriptor(primary, primary.is_unavailable),
            ProviderDescriptor(AnthropicProvider(settings.secondary), always),
            ProviderDescriptor(OllamaProvider(settings.local), _local_falls_back),
        )
    )
    log.info(
        "Provider chain: %s",
        " -> ".join(
            f"{d.provider.name}={d.provider.identifier}"
            + ("" if d.provider.is_configured() else " (not configured)")
            for d in chain.descriptors
        ),
    )
    return chain
