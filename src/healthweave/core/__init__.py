"""Core configuration and startup validation."""

from __future__ import annotations

from healthweave.core.config import AppSettings

__all__ = ["AppSettings"]
