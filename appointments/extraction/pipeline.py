"""Pipeline entrypoint for appointment document reports."""

from __future__ import annotations

import logging
import uuid

from .assembler import assemble_report
from .directive import build_directive
from .errors import DocumentProcessingError
from .oracle import ExtractionOracle, get_oracle
from .schema import OrganizationConfig, ReportRecord

logger = logging.getLogger(__name__)


def extract(
    text: str,
    oracle: ExtractionOracle | None = None,
    organization: OrganizationConfig | None = None,
) -> ReportRecord:
    """Build a report from the OCR text of one document.

    Any failure along the way surfaces as a single DocumentProcessingError;
    no partial report is ever returned.
    """
    request_id = f"doc_{uuid.uuid4().hex[:12]}"
    text = (text or "").strip()
    if not text:
        logger.warning("Empty document text", extra={"request_id": request_id})
        raise DocumentProcessingError()

    organization = organization or OrganizationConfig.from_settings()
    directive = build_directive(text)
    try:
        oracle = oracle or get_oracle()
        payload = oracle.extract(directive.text, directive.schema, directive.instructions)
        record = assemble_report(payload, organization)
    except Exception as exc:
        logger.exception("Document processing failed", extra={"request_id": request_id})
        raise DocumentProcessingError() from exc

    logger.info(
        "Report assembled",
        extra={"request_id": request_id, "mode": record.mode.value, "case_id": record.case_id},
    )
    return record
