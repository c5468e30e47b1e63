"""
URL configuration for the admin dashboard.

Everything under /dashboard is behind the access gate.
"""
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from businesses.views import DashboardView

urlpatterns = [
    path("", include("users.urls")),
    path("dashboard", DashboardView.as_view(), name="dashboard"),
    path("dashboard/", include("businesses.urls")),
    path("dashboard/", include("categories.urls")),

    # OpenAPI
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
]
