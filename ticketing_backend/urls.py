"""
URL configuration for the ticketing backend.
All API endpoints live under the `/api/` prefix; JWT auth under `/api/token/`.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

urlpatterns = [
    path("admin/", admin.site.urls),

    path("api/", RedirectView.as_view(pattern_name="swagger-ui", permanent=False)),

    #  Swagger
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    path("api/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/token/verify/", TokenVerifyView.as_view(), name="token_verify"),

    path("api/orders/", include("orders.urls")),
    path("api/payments/", include("payments.urls")),
    path("api/tickets/", include("tickets.urls")),
]

if settings.DEBUG and getattr(settings, "MEDIA_URL", "").startswith("/"):
    # local ticket PDFs; S3 serves them in production
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
