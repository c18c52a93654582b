"""Exceptions raised while turning document text into a report."""

from __future__ import annotations

PROCESSING_FAILED_MESSAGE = "Fallo al procesar el documento."


class ExtractionError(Exception):
    """Base class for extraction failures."""


class OracleError(ExtractionError):
    """The extraction oracle could not produce a response."""


class ReportSchemaError(ExtractionError):
    """The oracle response is not JSON or does not match the report schema."""


class DocumentReadError(ExtractionError):
    """An uploaded document could not be read as text."""


class DocumentProcessingError(ExtractionError):
    """User-facing failure: no report could be produced for the document."""

    def __init__(self, message: str = PROCESSING_FAILED_MESSAGE):
        super().__init__(message)
        self.message = message
