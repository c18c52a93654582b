from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

GEMINI_ORACLE = "appointments.extraction.oracle.GeminiOracle"


class AppointmentsConfig(AppConfig):
    name = "appointments"
    verbose_name = "Informes de designaciones"

    def ready(self):
        if settings.EXTRACTION_ORACLE == GEMINI_ORACLE and not settings.GEMINI_API_KEY:
            raise ImproperlyConfigured("GEMINI_API_KEY environment variable is not set.")
