"""Model providers and the ordered fallback chain."""

from __future__ import annotations

from healthweave.providers.chain import ProviderChain, ProviderDescriptor
from healthweave.providers.factory import create_provider_chain
from healthweave.providers.protocols import IModelProvider

__all__ = ["IModelProvider", "ProviderChain", "ProviderDescriptor", "create_provider_chain"]
