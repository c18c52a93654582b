from unittest.mock import patch

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase
from django.urls import reverse

from appointments.extraction import DocumentProcessingError
from appointments.services.report_renderer import render_html_to_pdf
from appointments.views import SESSION_KEY

from .test_report_renderer import make_cessation_record, make_record


class AnalyzeViewTests(SimpleTestCase):
    def setUp(self):
        self.url = reverse("appointments:analyze")

    def test_form_renders(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Analizar documento")

    def test_empty_submission_shows_form_error(self):
        with patch("appointments.views.extract_report") as mocked:
            response = self.client.post(self.url, {"text": "   "})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Pegue el texto del documento o suba un archivo.")
        mocked.assert_not_called()

    def test_text_submission_stores_report_and_redirects(self):
        with patch("appointments.views.extract_report", return_value=make_record()) as mocked:
            response = self.client.post(self.url, {"text": "4. TOMA DE POSESIÓN ..."})
        self.assertRedirects(response, reverse("appointments:report"))
        mocked.assert_called_once_with("4. TOMA DE POSESIÓN ...")

        response = self.client.get(reverse("appointments:report"))
        self.assertContains(response, "Informe del Formulario")
        self.assertContains(response, "GOMEZ MARIA LAURA")
        self.assertContains(response, "Fecha de alta")
        self.assertContains(response, "Reemplaza a")

    def test_processing_failure_shows_generic_error(self):
        with patch("appointments.views.extract_report", side_effect=DocumentProcessingError()):
            response = self.client.post(self.url, {"text": "texto ilegible"})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Fallo al procesar el documento.")
        self.assertNotIn(SESSION_KEY, self.client.session)

    def test_text_upload_is_read(self):
        upload = SimpleUploadedFile("ftw.txt", "5. CESE\nFECHA DE CESE: 31/07/2025".encode("utf-8"))
        with patch("appointments.views.extract_report", return_value=make_cessation_record()) as mocked:
            response = self.client.post(self.url, {"document": upload})
        self.assertRedirects(response, reverse("appointments:report"))
        mocked.assert_called_once_with("5. CESE\nFECHA DE CESE: 31/07/2025")

    def test_pdf_upload_is_read(self):
        pdf_bytes = render_html_to_pdf("<html><body><p>4. TOMA DE POSESION</p></body></html>")
        upload = SimpleUploadedFile("ftw.pdf", pdf_bytes, content_type="application/pdf")
        with patch("appointments.views.extract_report", return_value=make_record()) as mocked:
            self.client.post(self.url, {"document": upload})
        self.assertIn("TOMA DE POSESION", mocked.call_args[0][0])

    def test_unsupported_upload_is_rejected(self):
        upload = SimpleUploadedFile("ftw.jpg", b"fake", content_type="image/jpeg")
        with patch("appointments.views.extract_report") as mocked:
            response = self.client.post(self.url, {"document": upload})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "No se pudo leer el archivo.")
        mocked.assert_not_called()


class ReportViewTests(SimpleTestCase):
    def _analyze(self, record):
        with patch("appointments.views.extract_report", return_value=record):
            self.client.post(reverse("appointments:analyze"), {"text": "texto"})

    def test_report_without_session_redirects(self):
        response = self.client.get(reverse("appointments:report"))
        self.assertRedirects(response, reverse("appointments:analyze"))

    def test_empty_values_render_na(self):
        self._analyze(make_record(role=""))
        response = self.client.get(reverse("appointments:report"))
        self.assertContains(response, "N/A")

    def test_cessation_labels(self):
        self._analyze(make_cessation_record())
        response = self.client.get(reverse("appointments:report"))
        self.assertContains(response, "Fecha de Cese")
        self.assertContains(response, "Motivo de Cese")
        self.assertNotContains(response, "Reemplaza a")

    def test_copy_text_endpoint(self):
        self._analyze(make_cessation_record())
        response = self.client.get(reverse("appointments:report_text"))
        self.assertEqual(response["Content-Type"], "text/plain; charset=utf-8")
        body = response.content.decode("utf-8")
        self.assertTrue(body.startswith("Informe del Formulario\n"))
        self.assertIn("Motivo de Cese: Presentación reemplazado", body)

    def test_copy_text_without_report(self):
        response = self.client.get(reverse("appointments:report_text"))
        self.assertEqual(response.status_code, 404)

    def test_pdf_download(self):
        self._analyze(make_record())
        response = self.client.get(reverse("appointments:report_pdf"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertEqual(
            response["Content-Disposition"],
            'attachment; filename="Informe-GOMEZ_MARIA_LAURA-27-30111222-4.pdf"',
        )
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_pdf_download_encodes_accented_name(self):
        self._analyze(make_record(full_name="MUÑOZ ANA"))
        response = self.client.get(reverse("appointments:report_pdf"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response["Content-Disposition"],
            "attachment; filename*=utf-8''Informe-MU%C3%91OZ_ANA-27-30111222-4.pdf",
        )

    def test_reset_clears_report(self):
        self._analyze(make_record())
        response = self.client.post(reverse("appointments:reset"))
        self.assertRedirects(response, reverse("appointments:analyze"))
        response = self.client.get(reverse("appointments:report"))
        self.assertRedirects(response, reverse("appointments:analyze"))

    def test_analyze_redirects_to_existing_report(self):
        self._analyze(make_record())
        response = self.client.get(reverse("appointments:analyze"))
        self.assertRedirects(response, reverse("appointments:report"))
