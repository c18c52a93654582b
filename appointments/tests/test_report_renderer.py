from io import BytesIO

from django.test import SimpleTestCase
from pypdf import PdfReader

from appointments.extraction.rules import PRESENTATION_REASON, Mode
from appointments.extraction.schema import ReportRecord
from appointments.services.report_renderer import (
    display_rows,
    parse_report_text,
    pdf_filename,
    render_pdf,
    render_report_text,
    table_rows,
)


def make_record(**overrides) -> ReportRecord:
    values = {
        "case_id": "E.E. - 34142629 - 2025 - ESC200866",
        "establishment": "E.N.S. 2 EN L.VIVAS M. ACOSTA",
        "phone": "49317981",
        "delegation": "III",
        "division": "3511",
        "tax_id": "27-30111222-4",
        "role": "123456",
        "full_name": "GOMEZ MARIA LAURA",
        "review_status": "4",
        "effective_date": "10/03/2025",
        "position_description": "PROFESOR DE EDUCACIÓN MEDIA, EDUCACIÓN TECNOLÓGICA, 2.00 hs, 2° 1° Turno Tarde",
        "mode": Mode.APPOINTMENT,
        "replaced_person": "PEREZ JUAN CARLOS, 20-25444555-3, LICENCIA",
    }
    values.update(overrides)
    return ReportRecord(**values)


def make_cessation_record(**overrides) -> ReportRecord:
    values = {
        "mode": Mode.CESSATION,
        "effective_date": "31/07/2025",
        "replaced_person": None,
        "cessation_reason": PRESENTATION_REASON,
    }
    values.update(overrides)
    return make_record(**values)


class ReportTextTests(SimpleTestCase):
    def test_appointment_block(self):
        text = render_report_text(make_record())
        lines = text.splitlines()
        self.assertEqual(lines[0], "Informe del Formulario")
        self.assertEqual(lines[1], "Nº de Expediente: E.E. - 34142629 - 2025 - ESC200866")
        self.assertIn("Fecha de alta: 10/03/2025", lines)
        self.assertEqual(lines[-1], "Reemplaza a: PEREZ JUAN CARLOS, 20-25444555-3, LICENCIA")
        self.assertNotIn("Motivo de Cese", text)

    def test_cessation_block(self):
        text = render_report_text(make_cessation_record())
        self.assertIn("Fecha de Cese: 31/07/2025", text)
        self.assertTrue(text.endswith("Motivo de Cese: Presentación reemplazado"))
        self.assertNotIn("Reemplaza a", text)
        self.assertNotIn("Fecha de alta", text)

    def test_round_trip_recovers_fields(self):
        for record in (make_record(), make_cessation_record(), make_cessation_record(cessation_reason=None)):
            with self.subTest(mode=record.mode):
                self.assertEqual(parse_report_text(render_report_text(record)), record)


class ReportRowsTests(SimpleTestCase):
    def test_display_uses_na_for_empty_values(self):
        rows = dict(display_rows(make_record(role="", replaced_person=None)))
        self.assertEqual(rows["Rol"], "N/A")
        self.assertEqual(rows["Reemplaza a"], "N/A")
        self.assertEqual(rows["CUIL"], "27-30111222-4")

    def test_table_omits_empty_values(self):
        rows = table_rows(make_cessation_record(cessation_reason=None, role=""))
        labels = [label for label, _ in rows]
        self.assertNotIn("Motivo de Cese", labels)
        self.assertNotIn("Rol", labels)
        self.assertEqual(labels[0], "Nº de Expediente")
        self.assertIn("Fecha de Cese", labels)


class ReportPdfTests(SimpleTestCase):
    def test_filename_replaces_whitespace(self):
        self.assertEqual(pdf_filename(make_record()), "Informe-GOMEZ_MARIA_LAURA-27-30111222-4.pdf")

    def test_render_pdf_contains_table(self):
        file_io = render_pdf(make_record())
        data = file_io.getvalue()
        self.assertTrue(data.startswith(b"%PDF"))
        text = "\n".join(page.extract_text() for page in PdfReader(BytesIO(data)).pages)
        self.assertIn("Informe del Formulario", text)
        self.assertIn("GOMEZ MARIA LAURA", text)
        self.assertIn("Campo", text)
