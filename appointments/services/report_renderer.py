from io import BytesIO
import logging
import re

from django.template.loader import render_to_string
from django.utils import timezone
from xhtml2pdf import pisa

from ..extraction.rules import Mode
from ..extraction.schema import ReportRecord

logger = logging.getLogger(__name__)

REPORT_TITLE = "Informe del Formulario"
EMPTY_VALUE = "N/A"

# (label, record attribute) in display order; the date and the closing row
# depend on the report mode.
BASE_ROWS = [
    ("Nº de Expediente", "case_id"),
    ("Establecimiento", "establishment"),
    ("Teléfono", "phone"),
    ("Delegación", "delegation"),
    ("Repartición", "division"),
    ("CUIL", "tax_id"),
    ("Rol", "role"),
    ("Apellido y Nombre", "full_name"),
    ("Situación de revista", "review_status"),
]
DATE_LABELS = {Mode.CESSATION: "Fecha de Cese", Mode.APPOINTMENT: "Fecha de alta"}
POSITION_LABEL = "Cargo a cubrir"
ACTION_ROWS = {
    Mode.CESSATION: ("Motivo de Cese", "cessation_reason"),
    Mode.APPOINTMENT: ("Reemplaza a", "replaced_person"),
}


def report_rows(record: ReportRecord) -> list[tuple[str, str]]:
    """Labeled values in the fixed report order, empty values as ""."""
    rows = [(label, getattr(record, name)) for label, name in BASE_ROWS]
    rows.append((DATE_LABELS[record.mode], record.effective_date))
    rows.append((POSITION_LABEL, record.position_description))
    action_label, action_name = ACTION_ROWS[record.mode]
    rows.append((action_label, getattr(record, action_name)))
    return [(label, "" if value is None else str(value)) for label, value in rows]


def display_rows(record: ReportRecord) -> list[tuple[str, str]]:
    return [(label, value or EMPTY_VALUE) for label, value in report_rows(record)]


def table_rows(record: ReportRecord) -> list[tuple[str, str]]:
    return [(label, value) for label, value in report_rows(record) if value]


def render_report_text(record: ReportRecord) -> str:
    """Plain-text block copied to the clipboard."""
    lines = [REPORT_TITLE]
    lines.extend(f"{label}: {value}" for label, value in report_rows(record))
    return "\n".join(line.strip() for line in lines)


def parse_report_text(text: str) -> ReportRecord:
    """Read a block produced by ``render_report_text`` back into a record."""
    values: dict[str, str] = {}
    for line in (text or "").splitlines():
        label, sep, value = line.partition(":")
        if sep:
            values[label.strip()] = value.strip()

    mode = Mode.CESSATION if DATE_LABELS[Mode.CESSATION] in values else Mode.APPOINTMENT
    fields = {name: values.get(label, "") for label, name in BASE_ROWS}
    fields["effective_date"] = values.get(DATE_LABELS[mode], "")
    fields["position_description"] = values.get(POSITION_LABEL, "")
    action_label, action_name = ACTION_ROWS[mode]
    fields[action_name] = values.get(action_label) or None
    return ReportRecord(mode=mode, **fields)


def pdf_filename(record: ReportRecord) -> str:
    name = re.sub(r"\s", "_", record.full_name or "")
    return f"Informe-{name}-{record.tax_id}.pdf"


def render_report_html(record: ReportRecord) -> str:
    context = {
        "title": REPORT_TITLE,
        "rows": table_rows(record),
        "generated_at": timezone.localtime(),
    }
    return render_to_string("appointments/report_pdf.html", context)


def render_html_to_pdf(html: str) -> bytes:
    """Convert HTML to PDF bytes using xhtml2pdf."""
    output = BytesIO()
    result = pisa.CreatePDF(html, dest=output, encoding="utf-8")
    output.seek(0)
    if result.err:
        raise ValueError("Could not render PDF from report HTML.")
    return output.getvalue()


def render_pdf(record: ReportRecord) -> BytesIO:
    """Render the report as a two-column PDF table, omitting empty rows."""
    pdf_bytes = render_html_to_pdf(render_report_html(record))
    logger.debug("Rendered report PDF (%d bytes) for %s", len(pdf_bytes), record.case_id)
    return BytesIO(pdf_bytes)
