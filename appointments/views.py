import logging

from django.contrib import messages
from django.http import HttpResponse
from django.shortcuts import redirect, render
from django.utils.http import content_disposition_header
from django.views.decorators.http import require_http_methods, require_POST

from .documents import read_upload
from .extraction import DocumentProcessingError, ReportRecord, extract_report
from .extraction.errors import DocumentReadError
from .forms import DocumentForm
from .services.report_renderer import (
    REPORT_TITLE,
    display_rows,
    pdf_filename,
    render_pdf,
    render_report_text,
)

SESSION_KEY = "appointment_report"

logger = logging.getLogger(__name__)


def _session_report(request) -> ReportRecord | None:
    data = request.session.get(SESSION_KEY)
    if not data:
        return None
    try:
        return ReportRecord.from_dict(data)
    except (TypeError, ValueError):
        logger.warning("Discarding unreadable report stored in session")
        request.session.pop(SESSION_KEY, None)
        return None


@require_http_methods(["GET", "POST"])
def analyze(request):
    if request.method == "GET" and _session_report(request) is not None:
        return redirect("appointments:report")

    if request.method == "GET":
        return render(request, "appointments/analyze.html", {"form": DocumentForm()})

    form = DocumentForm(request.POST, request.FILES)
    if form.is_valid():
        try:
            text = form.cleaned_data["text"]
            upload = form.cleaned_data.get("document")
            if upload is not None:
                text = read_upload(upload)
            record = extract_report(text)
        except DocumentReadError as exc:
            logger.warning("Rejected uploaded document: %s", exc)
            form.add_error("document", "No se pudo leer el archivo.")
        except DocumentProcessingError as exc:
            messages.error(request, exc.message)
        else:
            request.session[SESSION_KEY] = record.to_dict()
            return redirect("appointments:report")

    return render(request, "appointments/analyze.html", {"form": form})


def report(request):
    record = _session_report(request)
    if record is None:
        return redirect("appointments:analyze")
    context = {
        "title": REPORT_TITLE,
        "record": record,
        "rows": display_rows(record),
        "report_text": render_report_text(record),
    }
    return render(request, "appointments/report.html", context)


def report_text(request):
    record = _session_report(request)
    if record is None:
        return HttpResponse("No report to copy.", status=404, content_type="text/plain; charset=utf-8")
    return HttpResponse(render_report_text(record), content_type="text/plain; charset=utf-8")


def report_pdf(request):
    record = _session_report(request)
    if record is None:
        return redirect("appointments:analyze")
    try:
        file_io = render_pdf(record)
    except Exception as exc:  # pragma: no cover - defensive logging
        logger.exception("Failed to generate report PDF", extra={"case_id": record.case_id})
        return HttpResponse(f"Could not render PDF: {exc}", status=500)

    response = HttpResponse(file_io.getvalue(), content_type="application/pdf")
    response["Content-Disposition"] = content_disposition_header(True, pdf_filename(record))
    return response


@require_POST
def reset(request):
    request.session.pop(SESSION_KEY, None)
    return redirect("appointments:analyze")
