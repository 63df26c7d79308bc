"""Ordered provider fallback chain.

The chain is data: a tuple of :class:`ProviderDescriptor` pairing a provider
with the predicate that decides whether one of its errors moves on to the
next provider. Adding a provider means adding a descriptor.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from healthweave.exceptions import AllProvidersFailedError
from healthweave.models import ModelInvocationResult
from healthweave.providers.protocols import IModelProvider

log = logging.getLogger(__name__)


def always(_exc: BaseException) -> bool:
    return True


@dataclass(frozen=True)
class ProviderDescriptor:
    """A provider and its "is this error unavailable" predicate."""

    provider: IModelProvider
    falls_back: Callable[[BaseException], bool] = always


class ProviderChain:
    """Tries providers strictly in order, each at most once."""

    def __init__(self, descriptors: Sequence[ProviderDescriptor]) -> None:
        self._descriptors = tuple(descriptors)

    @property
    def descriptors(self) -> tuple[ProviderDescriptor, ...]:
        return self._descriptors

    async def invoke(self, system_instruction: str, user_message: str) -> ModelInvocationResult:
        """Return the first successful answer.

        Raises the provider's own error unchanged when its predicate says
        not to fall back, and :class:`AllProvidersFailedError` when every
        configured provider failed.
        """
        input_chars = len(system_instruction) + len(user_message)
        attempted: list[str] = []
        last_exc: BaseException | None = None

        for descriptor in self._descriptors:
            provider = descriptor.provider
            if not provider.is_configured():
                log.info("Skipping %s provider %s: not configured", provider.name, provider.identifier)
                continue

            attempted.append(provider.name)
            start = time.perf_counter()
            try:
                text, identifier = await provider.invoke(system_instruction, user_message)
            except Exception as exc:
                elapsed_ms = int((time.perf_counter() - start) * 1000)
                if not descriptor.falls_back(exc):
                    log.error(
                        "provider_call | provider=%s model=%s outcome=error elapsed_ms=%d "
                        "input_chars=%d est_tokens=%d error=%s",
                        provider.name,
                        provider.identifier,
                        elapsed_ms,
                        input_chars,
                        input_chars // 4,
                        type(exc).__name__,
                    )
                    raise
                log.warning(
                    "provider_call | provider=%s model=%s outcome=unavailable elapsed_ms=%d "
                    "input_chars=%d est_tokens=%d error=%s",
                    provider.name,
                    provider.identifier,
                    elapsed_ms,
                    input_chars,
                    input_chars // 4,
                    exc,
                )
                last_exc = exc
                continue

            elapsed_ms = int((time.perf_counter() - start) * 1000)
            log.info(
                "provider_call | provider=%s model=%s outcome=ok elapsed_ms=%d "
                "input_chars=%d est_tokens=%d output_chars=%d",
                provider.name,
                identifier,
                elapsed_ms,
                input_chars,
                input_chars // 4,
                len(text),
            )
            return ModelInvocationResult(
                raw_text=text,
                provider_identifier=identifier,
                provider_name=provider.name,
                elapsed_ms=elapsed_ms,
            )

        if not attempted:
            message = "No model provider is configured."
        else:
            message = f"All model providers failed ({', '.join(attempted)})."
            if last_exc is not None:
                message += f" Last error: {last_exc}"
        raise AllProvidersFailedError(message, attempted=attempted) from last_exc
