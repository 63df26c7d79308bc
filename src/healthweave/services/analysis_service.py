"""Analysis service: prompt, provider chain, extraction, persistence."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from healthweave.exceptions import HealthWeaveError, ProviderRejectedError
from healthweave.extraction.report_parser import ReportParser
from healthweave.hooks import audit_hook
from healthweave.hooks.audit_hook import AuditHook
from healthweave.models import ParsedReport, SourceDocument
from healthweave.prompts.builder import PromptBuilder
from healthweave.providers.chain import ProviderChain
from healthweave.services.report_store import ReportStore

log = logging.getLogger(__name__)


class AnalysisService:
    """Single entry point turning documents into a stored :class:`ParsedReport`."""

    def __init__(
        self,
        chain: ProviderChain,
        parser: ReportParser,
        *,
        builder: Optional[PromptBuilder] = None,
        store: Optional[ReportStore] = None,
        audit: Optional[AuditHook] = None,
    ) -> None:
        self._chain = chain
        self._parser = parser
        self._builder = builder or PromptBuilder()
        self._store = store
        self._audit = audit or AuditHook()

    async def analyze(
        self,
        documents: Sequence[SourceDocument],
        context: Optional[str] = None,
        *,
        requester_id: str = "anonymous",
    ) -> ParsedReport:
        """Analyze ``documents`` and return the parsed report.

        Provider errors surface as :class:`ProviderError` subclasses; an
        error the chain re-raised unchanged is wrapped in
        :class:`ProviderRejectedError`. Malformed model output never raises.
        """
        if not documents:
            raise ValueError("At least one document is required for analysis")

        for doc in documents:
            self._audit.log_event(
                requester_id,
                audit_hook.DOCUMENT_UPLOAD,
                doc.id,
                file_name=doc.display_name,
                chars=len(doc.extracted_text),
            )

        prompt = self._builder.build(documents, context)
        resource = ",".join(doc.id for doc in documents)

        try:
            result = await self._chain.invoke(prompt.system_instruction, prompt.user_message)
        except HealthWeaveError as exc:
            self._audit.log_event(
                requester_id, audit_hook.ANALYSIS_FAILED, resource, success=False, error=str(exc)
            )
            raise
        except Exception as exc:
            self._audit.log_event(
                requester_id, audit_hook.ANALYSIS_FAILED, resource, success=False, error=str(exc)
            )
            raise ProviderRejectedError(
                f"The model provider rejected the request: {exc}", provider="primary"
            ) from exc

        report = self._parser.parse(
            result.raw_text,
            provider_identifier=result.provider_identifier,
            requester_id=requester_id,
            document_names=[doc.display_name for doc in documents],
        )
        if self._store is not None:
            self._store.save(report)

        self._audit.log_event(
            requester_id,
            audit_hook.ANALYSIS_COMPLETE,
            report.report_id,
            provider=result.provider_identifier,
            elapsed_ms=result.elapsed_ms,
            documents=len(documents),
        )
        log.info(
            "Analysis %s complete via %s in %dms (%d findings, %d recommendations)",
            report.report_id,
            result.provider_name,
            result.elapsed_ms,
            len(report.key_findings),
            len(report.recommendations),
        )
        return report
