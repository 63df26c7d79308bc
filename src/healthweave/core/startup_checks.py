"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from healthweave.core.config import AppSettings

log = logging.getLogger(__name__)


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_emulator_endpoint(settings)
    _check_fallback_providers(settings)
    _check_persistence(settings)


def _check_emulator_endpoint(settings: AppSettings) -> None:
    """An emulator endpoint in production silently enables provider fallback."""
    if settings.environment == "production" and settings.primary.aws_endpoint:
        log.warning(
            "HEALTHWEAVE_PRIMARY_AWS_ENDPOINT is set in production (%s). "
            "This should only be used for local emulators.",
            settings.primary.aws_endpoint,
        )


def _check_fallback_providers(settings: AppSettings) -> None:
    """Warn when an emulated primary has nothing to fall back to."""
    if not settings.primary.aws_endpoint:
        return
    if not settings.secondary.api_key and not settings.local.enabled:
        log.warning(
            "Primary provider points at an emulator but no fallback is usable: "
            "set HEALTHWEAVE_SECONDARY_API_KEY or HEALTHWEAVE_LOCAL_ENABLED=true."
        )


def _check_persistence(settings: AppSettings) -> None:
    """Reject S3 without a bucket; warn about file persistence in containers."""
    if settings.persistence.backend == "s3" and not settings.persistence.s3_bucket:
        raise ValueError(
            "HEALTHWEAVE_PERSISTENCE_BACKEND=s3 requires HEALTHWEAVE_PERSISTENCE_S3_BUCKET."
        )

    is_container = bool(
        os.environ.get("ECS_CONTAINER_METADATA_URI")
        or os.environ.get("KUBERNETES_SERVICE_HOST")
    )
    if is_container and settings.persistence.backend == "file":
        log.warning(
            "HEALTHWEAVE_PERSISTENCE_BACKEND=file in a container environment. "
            "Reports will be lost on container restart. Consider HEALTHWEAVE_PERSISTENCE_BACKEND=s3."
        )
