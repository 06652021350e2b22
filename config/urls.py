"""URL configuration for the floor booking project.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
JWT token endpoints, the booking API router and the OpenAPI schema.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView  # type: ignore

from apps.core.views import healthz

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('healthz/', healthz, name='healthz'),
    # Authentication
    path('api/v1/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/v1/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    # Application URLs
    path('api/v1/bookings/', include('apps.bookings.urls')),
    # API schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/schema/swagger/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
