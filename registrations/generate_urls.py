"""
URL routing for validation, generation and generated page download.
"""
from django.urls import path

from . import generation

urlpatterns = [
    path('validate/', generation.validate_html, name='validate-html'),
    path('form/<uuid:form_id>/', generation.generate_form, name='generate-form'),
    path('form/<str:filename>', generation.generated_form, name='generated-form'),
]
