"""
Read-all / write-all endpoints over the flat JSON documents.
Kept so the old static frontend can keep saving its forms and settings.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .legacy_store import JSONDocumentStore, LegacyStoreError

logger = logging.getLogger(__name__)


def _document_view(request, name):
    store = JSONDocumentStore()
    try:
        if request.method == 'GET':
            return Response(store.read(name))

        if not isinstance(request.data, (dict, list)):
            return Response({'error': 'Expected a JSON document'}, status=status.HTTP_400_BAD_REQUEST)
        store.write(name, request.data)
        return Response({'success': True})
    except LegacyStoreError as e:
        logger.error("Legacy %s %s failed: %s", request.method, name, e)
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def legacy_forms(request):
    """
    GET  /api/v1/legacy/forms/ - whole forms document ({} when nothing saved)
    POST /api/v1/legacy/forms/ - replace the whole forms document
    """
    return _document_view(request, 'forms')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def legacy_settings(request):
    """
    GET  /api/v1/legacy/settings/ - whole settings document
    POST /api/v1/legacy/settings/ - replace the whole settings document
    """
    return _document_view(request, 'settings')
