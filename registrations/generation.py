"""
API endpoints for validating Infusionsoft HTML and generating registration pages.
"""
import logging

from django.db import DatabaseError, transaction
from django.http import FileResponse
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .artifacts import ArtifactStore
from .generator import GenerationError, generate
from .models import RegistrationForm
from .serializers import HTML_REQUIRED_MESSAGE, ValidateHTMLSerializer
from .validation import validate

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def validate_html(request):
    """
    Validate pasted Infusionsoft form HTML.

    POST /api/v1/generate/validate/
    Body: { "infusionsoft_html": "<form ...>...</form>" }

    Returns: { "is_valid": bool, "errors": [...], "warnings": [...], "fields_found": {...} }
    """
    if not isinstance(request.data, dict):
        return Response({'error': HTML_REQUIRED_MESSAGE}, status=status.HTTP_400_BAD_REQUEST)

    serializer = ValidateHTMLSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'error': next(iter(serializer.errors.values()))[0]},
            status=status.HTTP_400_BAD_REQUEST,
        )

    result = validate(serializer.validated_data['infusionsoft_html'])
    return Response(result.to_dict(), status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def generate_form(request, form_id):
    """
    Generate the registration page for a form and store it as an artifact.

    POST /api/v1/generate/form/{id}/

    The form row is locked for the duration so two concurrent generations of
    the same form run one after the other.
    """
    store = ArtifactStore()

    try:
        with transaction.atomic():
            form = (
                RegistrationForm.objects
                .select_for_update()
                .filter(id=form_id, user=request.user)
                .first()
            )
            if form is None:
                return Response({'error': 'Form not found'}, status=status.HTTP_404_NOT_FOUND)

            if not request.user.has_bearer_token():
                return Response(
                    {'error': 'Bearer token not configured. Please update your settings.'},
                    status=status.HTTP_400_BAD_REQUEST,
                )

            validation = validate(form.infusionsoft_html)
            if not validation.is_valid:
                logger.warning("Form %s failed validation: %s", form.id, validation.errors)
                return Response(
                    {'error': 'Form validation failed', 'details': validation.errors},
                    status=status.HTTP_400_BAD_REQUEST,
                )

            generated_at = timezone.now()
            html = generate(
                form.infusionsoft_html,
                session_id=form.session_id,
                widget_id=form.widget_id,
                widget_version=form.widget_version,
                bearer_token=request.user.bearer_token,
                now=generated_at,
            )

            filename = form.artifact_filename
            store.write(filename, html)
            form.mark_generated(filename, generated_at)
    except (GenerationError, OSError, DatabaseError):
        logger.exception("Generate form error for form %s", form_id)
        return Response({'error': 'Failed to generate form'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info("Generated %s for form %s", filename, form.id)
    return Response({
        'message': 'Form generated successfully',
        'filename': filename,
        'download_url': request.build_absolute_uri(reverse('generated-form', args=[filename])),
        'generated_at': generated_at.isoformat(),
        'html': html,
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def generated_form(request, filename):
    """
    Serve a generated registration page. No authentication, so the page can be
    opened directly in a browser tab.

    GET /api/v1/generate/form/{filename}
    """
    store = ArtifactStore()
    if not store.exists(filename):
        return Response({'error': 'Generated form not found'}, status=status.HTTP_404_NOT_FOUND)
    return FileResponse(store.path_for(filename).open('rb'), content_type='text/html; charset=utf-8')
