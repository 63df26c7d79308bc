"""Model provider protocol and the shared litellm chat call."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

log = logging.getLogger(__name__)


@runtime_checkable
class IModelProvider(Protocol):
    """One backend in the fallback chain.

    ``name`` is the chain position (``"primary"``, ``"secondary"``,
    ``"tertiary"``); ``identifier`` is the configured model, e.g.
    ``"bedrock/anthropic.claude-3-5-sonnet-20241022-v2:0"``. ``invoke`` returns
    the same form built from the model the provider reported.
    """

    name: str

    @property
    def identifier(self) -> str:
        ...

    def is_configured(self) -> bool:
        """False when the provider lacks credentials and should be skipped."""
        ...

    async def invoke(self, system_instruction: str, user_message: str) -> tuple[str, str]:
        """Return ``(markdown answer, identifier of the model that produced it)``."""
        ...


async def chat_completion(
    model: str,
    system_instruction: str,
    user_message: str,
    **params: Any,
) -> tuple[str, str]:
    """Single non-streaming chat call via ``litellm.acompletion``.

    Returns ``(content, reported_model)``. ``reported_model`` is the model the
    provider says answered, without litellm's routing prefix, falling back to
    the requested model when the response does not name one.
    Retries are disabled: each provider is tried at most once per analysis.
    """
    from litellm import acompletion

    messages: list[dict[str, Any]] = [
        {"role": "system", "content": system_instruction},
        {"role": "user", "content": user_message},
    ]
    response = await acompletion(model=model, messages=messages, num_retries=0, **params)
    content = response.choices[0].message.content or ""
    if response.choices[0].finish_reason == "length":
        log.warning("Model %s stopped at max tokens; answer may be truncated", model)
    return content, _strip_route(getattr(response, "model", None) or model, model)


def _strip_route(reported: str, requested: str) -> str:
    route = requested.split("/", 1)[0] + "/" if "/" in requested else ""
    if route and reported.startswith(route):
        return reported[len(route):]
    return reported
