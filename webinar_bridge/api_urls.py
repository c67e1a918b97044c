"""
API URL routing for webinar_bridge.
All API endpoints are prefixed with /api/v1/
"""
from django.urls import path, include

from .views import health_check

urlpatterns = [
    # Health check (no auth) - GET /api/v1/health/
    path('health/', health_check, name='health'),
    # Dashboard authentication and bearer token settings
    path('auth/', include('accounts.urls')),
    # Form records (CRUD)
    path('forms/', include('registrations.urls')),
    # Validation, generation and generated artifact download
    path('generate/', include('registrations.generate_urls')),
    # Flat-file JSON storage kept for the old PHP frontend
    path('legacy/', include('registrations.legacy_urls')),
]
