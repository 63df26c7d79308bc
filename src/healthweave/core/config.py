"""Nested pydantic-settings configuration for the application.

Each group reads its own ``HEALTHWEAVE_<GROUP>_*`` env vars::

    export HEALTHWEAVE_PRIMARY_MODEL_ID=anthropic.claude-3-5-sonnet-20241022-v2:0
    export HEALTHWEAVE_SECONDARY_API_KEY=sk-ant-...
    export HEALTHWEAVE_LOCAL_MODEL=llama3.2
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class PrimaryProviderConfig(BaseSettings):
    """Primary hosted provider (AWS Bedrock).

    ``aws_endpoint`` is only set for an emulator such as LocalStack; when it
    is set and the emulator cannot serve ``bedrock-runtime`` the chain falls
    back to the secondary and local providers.
    """

    model_config = {"env_prefix": "HEALTHWEAVE_PRIMARY_"}

    model_id: str = "anthropic.claude-3-5-sonnet-20241022-v2:0"
    aws_region: str = "us-east-1"
    aws_endpoint: str = ""
    max_tokens: int = Field(default=4096, gt=0)
    # None keeps the HTTP client's own default
    timeout_seconds: Optional[float] = None


class SecondaryProviderConfig(BaseSettings):
    """Secondary hosted provider (Anthropic API). Skipped without an API key."""

    model_config = {"env_prefix": "HEALTHWEAVE_SECONDARY_"}

    api_key: str = ""
    model: str = "claude-3-5-sonnet-20241022"
    max_tokens: int = Field(default=4096, gt=0)
    timeout_seconds: Optional[float] = None


class LocalProviderConfig(BaseSettings):
    """Tertiary local provider (Ollama)."""

    model_config = {"env_prefix": "HEALTHWEAVE_LOCAL_"}

    enabled: bool = True
    base_url: str = "http://localhost:11434"
    model: str = "llama3.2"
    timeout_seconds: float = Field(default=300.0, gt=0.0)
    temperature: float = 0.7
    top_p: float = 0.9


class ExtractionConfig(BaseSettings):
    """Report extraction configuration.

    Env vars use ``HEALTHWEAVE_EXTRACTION_`` prefix.
    """

    model_config = {"env_prefix": "HEALTHWEAVE_EXTRACTION_"}

    fallback_max_items: int = Field(default=10, ge=1)
    findings_placeholder: str = "No specific findings identified."
    recommendations_placeholder: str = "No specific recommendations at this time."
    summary_placeholder: str = "Analysis complete."


class PDFFormattingConfig(BaseSettings):
    """PDF output formatting configuration.

    Env vars use ``HEALTHWEAVE_PDF_`` prefix::

        export HEALTHWEAVE_PDF_PAGE_SIZE=a4
        export HEALTHWEAVE_PDF_INCLUDE_APPENDIX=false
    """

    model_config = {"env_prefix": "HEALTHWEAVE_PDF_"}

    page_size: Literal["letter", "a4"] = "letter"
    margin_points: float = Field(default=50.0, gt=0.0, le=200.0)
    body_font_size: float = Field(default=11.0, ge=6, le=72)
    markdown_font_size: float = Field(default=10.0, ge=6, le=72)
    section_title_font_size: float = Field(default=14.0, ge=6, le=72)
    min_space_before_block: float = 100.0
    min_space_before_section: float = 140.0
    include_appendix: bool = True
    brand_name: str = "HealthWeave"


class PersistenceConfig(BaseSettings):
    """Report and audit persistence configuration.

    Env vars use ``HEALTHWEAVE_PERSISTENCE_`` prefix.
    """

    model_config = {"env_prefix": "HEALTHWEAVE_PERSISTENCE_"}

    backend: Literal["file", "s3", "memory"] = "file"
    store_path: Path = Path("./reports")
    audit_path: Path = Path("./audit")
    s3_bucket: str = ""
    s3_prefix: str = "reports/"
    s3_audit_prefix: str = "audit/"
    s3_region: str = "us-east-1"


class ObservabilityConfig(BaseSettings):
    """Observability configuration.

    Env vars use ``HEALTHWEAVE_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "HEALTHWEAVE_OBSERVABILITY_"}

    service_name: str = "healthweave"
    log_level: str = "INFO"


class APIConfig(BaseSettings):
    """HTTP API configuration.

    Env vars use ``HEALTHWEAVE_API_`` prefix.
    """

    model_config = {"env_prefix": "HEALTHWEAVE_API_"}

    title: str = "HealthWeave"
    description: str = "Clinical document synthesis and report rendering"
    host: str = "0.0.0.0"
    port: int = 4000
    max_documents: int = Field(default=10, ge=1)


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "HEALTHWEAVE_"}

    environment: Literal["development", "production"] = "development"

    primary: PrimaryProviderConfig = PrimaryProviderConfig()
    secondary: SecondaryProviderConfig = SecondaryProviderConfig()
    local: LocalProviderConfig = LocalProviderConfig()
    extraction: ExtractionConfig = ExtractionConfig()
    pdf: PDFFormattingConfig = PDFFormattingConfig()
    persistence: PersistenceConfig = PersistenceConfig()
    observability: ObservabilityConfig = ObservabilityConfig()
    api: APIConfig = APIConfig()
