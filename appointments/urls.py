from django.urls import path

from . import views

app_name = "appointments"

urlpatterns = [
    path("", views.analyze, name="analyze"),
    path("informe/", views.report, name="report"),
    path("informe/texto/", views.report_text, name="report_text"),
    path("informe/pdf/", views.report_pdf, name="report_pdf"),
    path("reiniciar/", views.reset, name="reset"),
]
