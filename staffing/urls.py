from django.urls import include, path
from django.views.generic import RedirectView

urlpatterns = [
    path("informes/", include("appointments.urls")),
    path("", RedirectView.as_view(pattern_name="appointments:analyze", permanent=False)),
]
