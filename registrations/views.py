"""
Views for registration form management.
"""
import logging

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from .models import RegistrationForm
from .permissions import IsFormOwner
from .serializers import RegistrationFormListSerializer, RegistrationFormSerializer

logger = logging.getLogger(__name__)


class RegistrationFormViewSet(viewsets.ModelViewSet):
    """
    ViewSet for managing registration forms.

    list: GET /api/v1/forms/ - List all forms for current user
    create: POST /api/v1/forms/ - Create a new form
    retrieve: GET /api/v1/forms/{id}/ - Get form details
    update: PUT /api/v1/forms/{id}/ - Update form
    partial_update: PATCH /api/v1/forms/{id}/ - Update some fields
    destroy: DELETE /api/v1/forms/{id}/ - Delete form (permanent)
    """
    permission_classes = [IsAuthenticated, IsFormOwner]

    def get_queryset(self):
        """Return only forms owned by the current user."""
        return RegistrationForm.objects.filter(user=self.request.user)

    def get_serializer_class(self):
        if self.action == 'list':
            return RegistrationFormListSerializer
        return RegistrationFormSerializer

    def perform_create(self, serializer):
        """Set the user when creating a form."""
        form = serializer.save(user=self.request.user)
        logger.info("User %s created form %s", self.request.user.id, form.id)

    def perform_destroy(self, instance):
        logger.info("User %s deleted form %s", self.request.user.id, instance.id)
        instance.delete()
