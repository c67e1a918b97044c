"""
URL routing for the legacy flat-file storage.
"""
from django.urls import path

from . import legacy_views

urlpatterns = [
    path('forms/', legacy_views.legacy_forms, name='legacy-forms'),
    path('settings/', legacy_views.legacy_settings, name='legacy-settings'),
]
