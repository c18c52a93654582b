"""Document extraction layer.

Swap the oracle through the EXTRACTION_ORACLE setting without changing callers.
"""

from .errors import DocumentProcessingError
from .pipeline import extract as extract_report
from .schema import ReportRecord

__all__ = ["DocumentProcessingError", "ReportRecord", "extract_report"]
